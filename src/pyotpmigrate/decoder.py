from typing import List
from urllib.parse import unquote, urlsplit

from .base64url import decode_base64url
from .errors import MalformedUri
from .schema import MigrationPayload, OtpAccount, parse_migration_payload, payload_to_accounts


def extract_data_parameter(uri: str) -> str:
    """Return the raw, still percent-encoded ``data`` value of an export URI.

    The query is split by hand rather than with ``parse_qs`` so that a bare
    ``+`` in the base64 text survives instead of turning into a space.
    """
    if not isinstance(uri, str) or not uri.strip():
        raise MalformedUri('Export URI is empty')

    try:
        parts = urlsplit(uri.strip())
    except ValueError as e:
        raise MalformedUri(f'Invalid export URI: {e}') from e

    if not parts.scheme:
        raise MalformedUri('Invalid export URI: missing scheme')

    for pair in parts.query.split('&'):
        key, _, value = pair.partition('=')
        if unquote(key) == 'data' and value:
            return value

    raise MalformedUri('Invalid export URI: missing data parameter')


def decode_data_parameter(value: str, strict: bool = False) -> List[OtpAccount]:
    return payload_to_accounts(_parse(value, strict))


def decode_export(uri: str, strict: bool = False) -> MigrationPayload:
    return _parse(extract_data_parameter(uri), strict)


def decode_export_uri(uri: str, strict: bool = False) -> List[OtpAccount]:
    """Decode an ``otpauth-migration://`` URI into its accounts, in export order."""
    return payload_to_accounts(decode_export(uri, strict=strict))


def _parse(value: str, strict: bool) -> MigrationPayload:
    raw = decode_base64url(unquote(value), strict=strict)
    return parse_migration_payload(raw)
