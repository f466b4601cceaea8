# https://protobuf.dev/programming-guides/encoding/

from typing import Iterator, Tuple, Union

from .errors import MalformedPayload

VARINT = 0
I64 = 1
LEN = 2
SGROUP = 3
EGROUP = 4
I32 = 5

MAX_VARINT_BYTES = 10


def read_varint(buf: bytes, pos: int) -> Tuple[int, int]:
    result = 0
    shift = 0
    start = pos
    while True:
        if pos >= len(buf):
            raise MalformedPayload(f'Truncated varint at offset {start}', offset=start)
        if pos - start >= MAX_VARINT_BYTES:
            raise MalformedPayload(f'Varint too long at offset {start}', offset=start)
        b = buf[pos]
        pos += 1
        result |= (b & 0x7F) << shift
        if b & 0x80 == 0:
            return result & 0xFFFFFFFFFFFFFFFF, pos
        shift += 7


def read_fixed(buf: bytes, pos: int, length: int) -> Tuple[bytes, int]:
    end = pos + length
    if end > len(buf):
        raise MalformedPayload(
            f'Field of {length} bytes at offset {pos} exceeds the '
            f'{len(buf) - pos} bytes remaining', offset=pos)
    return buf[pos:end], end


def read_tag(buf: bytes, pos: int) -> Tuple[int, int, int]:
    tag_offset = pos
    tag, pos = read_varint(buf, pos)
    if tag >> 3 == 0:
        raise MalformedPayload(f'Invalid field number 0 at offset {tag_offset}', offset=tag_offset)
    return tag >> 3, tag & 0x07, pos


def read_value(buf: bytes, pos: int, field_number: int, wire_type: int) -> Tuple[Union[int, bytes], int]:
    if wire_type == VARINT:
        return read_varint(buf, pos)
    if wire_type == I64:
        return read_fixed(buf, pos, 8)
    if wire_type == LEN:
        length, pos = read_varint(buf, pos)
        return read_fixed(buf, pos, length)
    if wire_type == I32:
        return read_fixed(buf, pos, 4)
    raise MalformedPayload(
        f'Unsupported wire type {wire_type} for field {field_number} at offset {pos}', offset=pos)


def skip_group(buf: bytes, pos: int, field_number: int) -> Tuple[bytes, int]:
    """Skip a deprecated group, nested groups included.

    Returns the group body and the offset just past its end-group tag.
    """
    start = pos
    open_groups = [field_number]
    while open_groups:
        if pos >= len(buf):
            raise MalformedPayload(f'Unterminated group {field_number} at offset {start}', offset=start)
        tag_offset = pos
        number, wire_type, pos = read_tag(buf, pos)
        if wire_type == SGROUP:
            open_groups.append(number)
        elif wire_type == EGROUP:
            expected = open_groups.pop()
            if number != expected:
                raise MalformedPayload(
                    f'End of group {number} at offset {tag_offset} does not close group {expected}',
                    offset=tag_offset)
        else:
            _, pos = read_value(buf, pos, number, wire_type)
    return buf[start:tag_offset], pos


def iter_fields(buf: bytes) -> Iterator[Tuple[int, int, Union[int, bytes]]]:
    """Walk a serialized message and yield ``(field_number, wire_type, value)``.

    Varints are yielded as unsigned ints, every other wire type as the raw
    bytes of the field (the body, for groups), so callers can skip fields
    they do not know about.
    """
    pos = 0
    while pos < len(buf):
        tag_offset = pos
        field_number, wire_type, pos = read_tag(buf, pos)

        if wire_type == SGROUP:
            value, pos = skip_group(buf, pos, field_number)
        elif wire_type == EGROUP:
            raise MalformedPayload(
                f'End of group {field_number} at offset {tag_offset} without a matching start',
                offset=tag_offset)
        else:
            value, pos = read_value(buf, pos, field_number, wire_type)

        yield field_number, wire_type, value


def to_signed(value: int) -> int:
    """Reinterpret an unsigned 64-bit varint as two's complement."""
    if value & (1 << 63):
        return value - (1 << 64)
    return value


def to_int32(value: int) -> int:
    """Truncate a varint to 32 bits, the way int32 fields are read."""
    value &= 0xFFFFFFFF
    if value & (1 << 31):
        return value - (1 << 32)
    return value
