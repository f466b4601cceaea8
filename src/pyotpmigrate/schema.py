"""Fixed schema of the Google Authenticator ``otpauth-migration`` payload.

    message MigrationPayload {
      repeated OtpParameters otp_parameters = 1;
      int32 version = 2;
      int32 batch_size = 3;
      int32 batch_index = 4;
      int32 batch_id = 5;
    }

    message OtpParameters {
      bytes secret = 1;
      string name = 2;
      string issuer = 3;
      Algorithm algorithm = 4;
      DigitCount digits = 5;
      OtpType type = 6;
      int64 counter = 7;
      string unique_id = 8;
    }
"""

import base64
import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .base32 import encode_base32
from .wire import LEN, VARINT, iter_fields, to_int32, to_signed

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = 1


class _WireEnum(enum.IntEnum):

    @classmethod
    def from_wire(cls, value: int):
        try:
            return cls(value)
        except ValueError:
            return cls.UNSPECIFIED


class Algorithm(_WireEnum):
    UNSPECIFIED = 0
    SHA1 = 1
    SHA256 = 2
    SHA512 = 3
    MD5 = 4


class DigitCount(_WireEnum):
    UNSPECIFIED = 0
    SIX = 1
    EIGHT = 2
    SEVEN = 3


class OtpType(_WireEnum):
    UNSPECIFIED = 0
    HOTP = 1
    TOTP = 2


@dataclass(frozen=True)
class OtpParameter:
    secret: Optional[bytes] = None
    name: Optional[str] = None
    issuer: Optional[str] = None
    algorithm: Optional[Algorithm] = None
    digits: Optional[DigitCount] = None
    type: Optional[OtpType] = None
    counter: Optional[int] = None
    unique_id: Optional[str] = None


@dataclass(frozen=True)
class MigrationPayload:
    otp_parameters: Tuple[OtpParameter, ...] = field(default_factory=tuple)
    version: Optional[int] = None
    batch_size: Optional[int] = None
    batch_index: Optional[int] = None
    batch_id: Optional[int] = None


@dataclass(frozen=True)
class OtpAccount:
    """One decoded account, with enums given by name and the secret in Base32."""

    secret: Optional[bytes]
    name: Optional[str]
    issuer: Optional[str]
    algorithm: Optional[str]
    digits: Optional[str]
    type: Optional[str]
    counter: Optional[int]
    unique_id: Optional[str]
    totp_secret: Optional[str]

    def as_dict(self) -> dict:
        """Plain record with absent fields left out.

        ``totpSecret`` is always present. ``counter`` is a decimal string and
        ``secret`` standard base64, as in the protobuf JSON mapping.
        """
        record = {}
        if self.secret is not None:
            record['secret'] = base64.b64encode(self.secret).decode('ascii')
        for key, value in (
            ('name', self.name),
            ('issuer', self.issuer),
            ('algorithm', self.algorithm),
            ('digits', self.digits),
            ('type', self.type),
        ):
            if value is not None:
                record[key] = value
        if self.counter is not None:
            record['counter'] = str(self.counter)
        if self.unique_id is not None:
            record['uniqueId'] = self.unique_id
        record['totpSecret'] = self.totp_secret
        return record


def _text(value: bytes) -> str:
    return value.decode('utf-8', errors='replace')


def parse_otp_parameter(buf: bytes) -> OtpParameter:
    values = {}
    for number, wire_type, value in iter_fields(buf):
        if wire_type == LEN:
            if number == 1:
                values['secret'] = value
            elif number == 2:
                values['name'] = _text(value)
            elif number == 3:
                values['issuer'] = _text(value)
            elif number == 8:
                values['unique_id'] = _text(value)
        elif wire_type == VARINT:
            if number == 4:
                values['algorithm'] = Algorithm.from_wire(value)
            elif number == 5:
                values['digits'] = DigitCount.from_wire(value)
            elif number == 6:
                values['type'] = OtpType.from_wire(value)
            elif number == 7:
                values['counter'] = to_signed(value)
            elif number == 8:
                values['unique_id'] = str(value)
    return OtpParameter(**values)


_PAYLOAD_INTS = {
    2: 'version',
    3: 'batch_size',
    4: 'batch_index',
    5: 'batch_id',
}


def parse_migration_payload(buf: bytes) -> MigrationPayload:
    otp_parameters = []
    values = {}
    for number, wire_type, value in iter_fields(buf):
        if number == 1 and wire_type == LEN:
            otp_parameters.append(parse_otp_parameter(value))
        elif wire_type == VARINT and number in _PAYLOAD_INTS:
            values[_PAYLOAD_INTS[number]] = to_int32(value)
    return MigrationPayload(otp_parameters=tuple(otp_parameters), **values)


def _name(value: Optional[enum.IntEnum]) -> Optional[str]:
    return value.name if value is not None else None


def to_account(parameter: OtpParameter) -> OtpAccount:
    return OtpAccount(
        secret=parameter.secret,
        name=parameter.name,
        issuer=parameter.issuer,
        algorithm=_name(parameter.algorithm),
        digits=_name(parameter.digits),
        type=_name(parameter.type),
        counter=parameter.counter,
        unique_id=parameter.unique_id,
        totp_secret=encode_base32(parameter.secret),
    )


def payload_to_accounts(payload: MigrationPayload) -> List[OtpAccount]:
    if payload.version is not None and payload.version != SUPPORTED_VERSION:
        logger.warning('Unexpected migration payload version "%s". Results might be inaccurate.',
                       payload.version)
    return [to_account(parameter) for parameter in payload.otp_parameters]
