"""VarInt encoding used for lengths and ids in the Minecraft protocol.

A VarInt stores a 32-bit two's-complement integer in 1-5 bytes. Each byte
carries 7 value bits, least-significant group first, and the high bit of
every byte except the last is set to signal that another byte follows.
"""

from __future__ import annotations

from mcping.errors import FramingError

MAX_VARINT_BYTES = 5

_SEGMENT_BITS = 0x7F
_CONTINUE_BIT = 0x80
_UINT32_MASK = 0xFFFFFFFF
_SIGN_BIT = 1 << 31
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def encode_varint(value: int) -> bytes:
    """Encode a signed 32-bit integer as a VarInt.

    Negative values are written as their unsigned 32-bit pattern
    (``2**32 + value``), so they always take the full 5 bytes.

    Raises:
        ValueError: If the value does not fit in a signed 32-bit integer.
    """
    if not _INT32_MIN <= value <= _INT32_MAX:
        msg = f"VarInt value out of 32-bit range: {value}"
        raise ValueError(msg)

    remaining = value & _UINT32_MASK
    out = bytearray()
    while True:
        byte = remaining & _SEGMENT_BITS
        remaining >>= 7
        if remaining:
            out.append(byte | _CONTINUE_BIT)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a VarInt starting at ``offset`` in ``data``.

    Returns (value, bytes_consumed) so callers can advance past the field.

    Raises:
        FramingError: If the data ends before a terminating byte, or more
            than five bytes carry the continuation bit.
    """
    result = 0
    for i in range(MAX_VARINT_BYTES):
        pos = offset + i
        if pos >= len(data):
            msg = f"VarInt truncated after {i} byte(s)"
            raise FramingError(msg)

        byte = data[pos]
        result |= (byte & _SEGMENT_BITS) << (7 * i)
        if not byte & _CONTINUE_BIT:
            result &= _UINT32_MASK
            if result & _SIGN_BIT:
                result -= 1 << 32
            return result, i + 1

    msg = f"VarInt longer than {MAX_VARINT_BYTES} bytes"
    raise FramingError(msg)


def varint_decodable(buffer: bytes) -> bool:
    """Whether ``buffer`` holds a complete VarInt.

    Only meaningful when ``buffer`` starts exactly at a VarInt boundary:
    the VarInt is complete once the last byte has its high bit clear.
    """
    return bool(buffer) and not buffer[-1] & _CONTINUE_BIT
