# https://github.com/google/google-authenticator/wiki/Key-Uri-Format

import io
from typing import Optional
from urllib.parse import quote, urlencode

# https://github.com/lincolnloop/python-qrcode
import qrcode
import qrcode.constants

from .schema import OtpAccount

DEFAULT_PERIOD = 30

_DIGITS = {
    'SEVEN': 7,
    'EIGHT': 8,
}


def build_otpauth_uri(account: OtpAccount) -> Optional[str]:
    """Build the ``otpauth://`` URI that re-imports a single account.

    Returns ``None`` when the account has no secret to export.
    """
    if not account.totp_secret:
        return None

    otp_type = 'hotp' if account.type == 'HOTP' else 'totp'
    issuer = (account.issuer or '').strip()
    name = (account.name or '').strip()
    if issuer and name:
        label = f'{issuer}:{name}'
    else:
        label = issuer or name or 'Account'

    params = [('secret', account.totp_secret)]
    if issuer:
        params.append(('issuer', issuer))

    digits = _DIGITS.get(account.digits, 6)
    if digits != 6:
        params.append(('digits', digits))

    if account.algorithm and account.algorithm not in ('SHA1', 'UNSPECIFIED'):
        params.append(('algorithm', account.algorithm))

    if otp_type == 'hotp':
        if account.counter is not None:
            params.append(('counter', account.counter))
    else:
        params.append(('period', DEFAULT_PERIOD))

    return f'otpauth://{otp_type}/{quote(label, safe="")}?{urlencode(params, quote_via=quote)}'


def _make_qr(data: str, box_size: int = 10) -> qrcode.QRCode:
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=box_size)
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def render_qr_ascii(data: str) -> str:
    with io.StringIO() as output:
        _make_qr(data).print_ascii(out=output, invert=True)
        return output.getvalue()


def save_qr_png(data: str, path, box_size: int = 3):
    img = _make_qr(data, box_size=box_size).make_image()
    img.save(path)
