import base64
from urllib.parse import quote

import pytest
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

ALGORITHM = {'UNSPECIFIED': 0, 'SHA1': 1, 'SHA256': 2, 'SHA512': 3, 'MD5': 4}
DIGITS = {'UNSPECIFIED': 0, 'SIX': 1, 'EIGHT': 2, 'SEVEN': 3}
OTP_TYPE = {'UNSPECIFIED': 0, 'HOTP': 1, 'TOTP': 2}

# Real exports, as found in the wild.
EXAMPLE_EXPORT = ('otpauth-migration://offline?data='
                  'CjkKCkhlbGxvId6tvu8SHEV4YW1wbGU6dXNlcm5hbWVAZXhhbXBsZS5jb20aB0V4YW1wbGUgASgBMAIQARgBIAAo6PbxNg')
LONG_EXPORT = ('otpauth-migration://offline?data='
               'CmgKFEhlbGxvId6tvu9IZWxsbyHerb7vEjNMb25nQ29tcGFueU5hbWVJc3N1ZXI6bG9uZ3VzZXJuYW1lMTIzNDVAZXhhbXBsZS5jb20a'
               'FUxvbmdDb21wYW55TmFtZUlzc3VlciABKAEwAhABGAEgACjCu6%2Bn%2BP%2F%2F%2F%2F8B')


def _schema():
    field = descriptor_pb2.FieldDescriptorProto
    proto = descriptor_pb2.FileDescriptorProto(name='migration_test.proto', package='migration_test', syntax='proto3')

    otp = proto.message_type.add(name='OtpParameters')
    for name, number, kind in (
        ('secret', 1, field.TYPE_BYTES),
        ('name', 2, field.TYPE_STRING),
        ('issuer', 3, field.TYPE_STRING),
        ('algorithm', 4, field.TYPE_INT32),
        ('digits', 5, field.TYPE_INT32),
        ('type', 6, field.TYPE_INT32),
        ('counter', 7, field.TYPE_INT64),
        ('unique_id', 8, field.TYPE_STRING),
    ):
        otp.field.add(name=name, number=number, type=kind, label=field.LABEL_OPTIONAL)

    payload = proto.message_type.add(name='MigrationPayload')
    payload.field.add(name='otp_parameters', number=1, type=field.TYPE_MESSAGE, label=field.LABEL_REPEATED,
                      type_name='.migration_test.OtpParameters')
    for name, number in (('version', 2), ('batch_size', 3), ('batch_index', 4), ('batch_id', 5)):
        payload.field.add(name=name, number=number, type=field.TYPE_INT32, label=field.LABEL_OPTIONAL)

    pool = descriptor_pool.DescriptorPool()
    pool.Add(proto)
    return message_factory.GetMessageClass(pool.FindMessageTypeByName('migration_test.MigrationPayload'))


Payload = _schema()


def otp(**params):
    """OtpParameters fields, with enums given by name."""
    for key, table in (('algorithm', ALGORITHM), ('digits', DIGITS), ('type', OTP_TYPE)):
        if isinstance(params.get(key), str):
            params[key] = table[params[key]]
    return params


def serialize(*parameters, version=1, **fields) -> bytes:
    payload = Payload(version=version, **fields)
    for params in parameters:
        payload.otp_parameters.add(**otp(**params))
    return payload.SerializeToString()


def to_uri(raw: bytes) -> str:
    return 'otpauth-migration://offline?data=' + quote(base64.b64encode(raw).decode('ascii'), safe='')


def varint(value: int) -> bytes:
    out = bytearray()
    value &= 0xFFFFFFFFFFFFFFFF
    while value >= 0x80:
        out.append(0x80 | (value & 0x7F))
        value >>= 7
    out.append(value)
    return bytes(out)


def raw_field(number: int, wire_type: int, payload: bytes) -> bytes:
    """Hand-assemble one field, for the cases the protobuf runtime will not produce."""
    if wire_type == 2:
        payload = varint(len(payload)) + payload
    return varint(number << 3 | wire_type) + payload


@pytest.fixture
def export_uri():
    def make(*parameters, **fields):
        return to_uri(serialize(*parameters, **fields))
    return make
