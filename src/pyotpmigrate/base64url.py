# https://datatracker.ietf.org/doc/html/rfc4648#section-5

from .errors import MalformedPayload

ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/'
_VALUES = {char: index for index, char in enumerate(ALPHABET)}


def decode_base64url(text: str, strict: bool = False) -> bytes:
    """Decode standard or URL-safe base64, with or without padding.

    Decoding stops at the first ``=``. Characters outside the alphabet are
    skipped, since exports copied from a scan or a chat window often pick up
    stray characters. Pass ``strict=True`` to reject them instead.
    """
    text = ''.join(text.split()).replace('-', '+').replace('_', '/')

    output = bytearray()
    buffer = 0
    bits = 0
    for offset, char in enumerate(text):
        if char == '=':
            break

        value = _VALUES.get(char)
        if value is None:
            if strict:
                raise MalformedPayload(
                    f'Invalid base64 character {char!r} at offset {offset}',
                    stage='base64', offset=offset)
            continue

        buffer = ((buffer << 6) | value) & 0xFFFF
        bits += 6
        if bits >= 8:
            bits -= 8
            output.append((buffer >> bits) & 0xFF)

    return bytes(output)
