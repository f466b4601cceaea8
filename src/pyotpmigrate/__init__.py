from .base32 import encode_base32
from .base64url import decode_base64url
from .decoder import decode_data_parameter, decode_export, decode_export_uri
from .errors import MalformedPayload, MalformedUri, MigrationError
from .otpauth import build_otpauth_uri
from .schema import Algorithm, DigitCount, MigrationPayload, OtpAccount, OtpParameter, OtpType

__version__ = '0.1.0'

__all__ = [
    'Algorithm',
    'DigitCount',
    'MalformedPayload',
    'MalformedUri',
    'MigrationError',
    'MigrationPayload',
    'OtpAccount',
    'OtpParameter',
    'OtpType',
    'build_otpauth_uri',
    'decode_base64url',
    'decode_data_parameter',
    'decode_export',
    'decode_export_uri',
    'encode_base32',
]
