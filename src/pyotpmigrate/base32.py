# https://datatracker.ietf.org/doc/html/rfc4648#section-6

from typing import Optional, Union

ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ234567'


def encode_base32(data: Optional[Union[bytes, bytearray, memoryview]]) -> Optional[str]:
    if data is None:
        return None

    data = bytes(data)
    if not data:
        return ''

    chars = []
    buffer = 0
    bits = 0
    for byte in data:
        buffer = (buffer << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            chars.append(ALPHABET[(buffer >> bits) & 0x1F])
        buffer &= (1 << bits) - 1

    # last group is zero-filled on the right
    if bits:
        chars.append(ALPHABET[(buffer << (5 - bits)) & 0x1F])

    if len(chars) % 8:
        chars.append('=' * (8 - len(chars) % 8))

    return ''.join(chars)
