"""Field codecs for the wire types used by the status exchange."""

from __future__ import annotations

import json
import struct
from typing import Any, Protocol

from mcping.errors import FramingError, PayloadDecodeError
from mcping.varint import decode_varint, encode_varint

_USHORT = struct.Struct(">H")


class Encodable(Protocol):
    """A field type that can be written to the wire."""

    @staticmethod
    def encode(value: Any) -> bytes: ...


class Decodable(Protocol):
    """A field type that can be read from the wire.

    ``decode`` returns (value, bytes_consumed).
    """

    @staticmethod
    def decode(data: bytes) -> tuple[Any, int]: ...


class VarInt:
    """Signed 32-bit integer in VarInt form."""

    @staticmethod
    def encode(value: int) -> bytes:
        return encode_varint(value)

    @staticmethod
    def decode(data: bytes) -> tuple[int, int]:
        return decode_varint(data)


class UnsignedShort:
    """Big-endian 16-bit unsigned integer."""

    @staticmethod
    def encode(value: int) -> bytes:
        if not 0 <= value <= 0xFFFF:
            msg = f"UnsignedShort value out of range: {value}"
            raise ValueError(msg)
        return _USHORT.pack(value)

    @staticmethod
    def decode(data: bytes) -> tuple[int, int]:
        if len(data) < _USHORT.size:
            msg = f"UnsignedShort needs 2 bytes, got {len(data)}"
            raise PayloadDecodeError(msg)
        (value,) = _USHORT.unpack_from(data, 0)
        return value, _USHORT.size


class String:
    """UTF-8 text prefixed with its length in bytes as a VarInt."""

    @staticmethod
    def encode(value: str | bytes) -> bytes:
        raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
        return encode_varint(len(raw)) + raw

    @staticmethod
    def decode(data: bytes) -> tuple[str, int]:
        try:
            length, prefix_size = decode_varint(data)
        except FramingError as e:
            msg = f"Invalid string length prefix: {e}"
            raise PayloadDecodeError(msg) from e
        if length < 0:
            msg = f"Negative string length: {length}"
            raise PayloadDecodeError(msg)

        end = prefix_size + length
        if end > len(data):
            msg = f"String declares {length} bytes but only {len(data) - prefix_size} remain"
            raise PayloadDecodeError(msg)

        try:
            text = bytes(data[prefix_size:end]).decode("utf-8")
        except UnicodeDecodeError as e:
            msg = f"String is not valid UTF-8: {e}"
            raise PayloadDecodeError(msg) from e
        return text, end


class Json:
    """A String whose text is a JSON document.

    Decode-only: the client never sends JSON, so there is no ``encode``.
    """

    @staticmethod
    def decode(data: bytes) -> tuple[Any, int]:
        text, consumed = String.decode(data)
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            msg = f"Invalid JSON document: {e}"
            raise PayloadDecodeError(msg) from e
        except RecursionError as e:
            msg = "JSON document nested too deeply"
            raise PayloadDecodeError(msg) from e
        return document, consumed
