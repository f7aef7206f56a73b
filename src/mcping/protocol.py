"""Minecraft status protocol message building and packet framing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any

from mcping.errors import UnknownPacketError, UnsupportedOperationError
from mcping.fields import Json, String, UnsignedShort, VarInt
from mcping.varint import decode_varint, encode_varint

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mcping.fields import Decodable, Encodable

log = logging.getLogger(__name__)

HANDSHAKE_PACKET_ID = 0x00
STATUS_REQUEST_PACKET_ID = 0x00

# 1.14.4; any version works for status, servers answer with their own.
DEFAULT_PROTOCOL_VERSION = 498


class NextState(IntEnum):
    """Connection state requested by the handshake."""

    STATUS = 1
    LOGIN = 2


@dataclass(frozen=True)
class Field:
    """A single typed value and its wire encoding."""

    type: Encodable
    value: Any
    encoded: bytes

    @property
    def size(self) -> int:
        return len(self.encoded)


@dataclass
class Message:
    """An ordered, append-only sequence of fields for an outbound packet."""

    fields: list[Field] = field(default_factory=list)

    def append(self, field_type: Encodable, value: Any) -> Message:
        """Encode ``value`` as ``field_type`` and add it to the end.

        Returns the message so calls can be chained.
        """
        encode = getattr(field_type, "encode", None)
        if encode is None:
            name = getattr(field_type, "__name__", repr(field_type))
            msg = f"{name} fields are decode-only and cannot be encoded"
            raise UnsupportedOperationError(msg)
        self.fields.append(Field(type=field_type, value=value, encoded=encode(value)))
        return self

    def encode(self) -> bytes:
        """Concatenate every field's bytes in append order."""
        return b"".join(f.encoded for f in self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)


class InboundPacket(Enum):
    """Field layouts of the packets the client knows how to decode."""

    STATUS_RESPONSE = (0x00, (("data", Json),))

    def __init__(
        self, packet_id: int, layout: tuple[tuple[str, Decodable], ...]
    ) -> None:
        self.packet_id = packet_id
        self.layout = layout

    @classmethod
    def from_id(cls, packet_id: int) -> InboundPacket:
        for member in cls:
            if member.packet_id == packet_id:
                return member
        msg = f"No field layout registered for packet id 0x{packet_id & 0xFFFFFFFF:02X}"
        raise UnknownPacketError(msg)


@dataclass(frozen=True)
class Packet:
    """A single length-prefixed packet.

    Wire format: [length:varint][packet_id:varint][payload]
    Length covers the encoded packet id and the payload, not itself.
    """

    packet_id: int
    payload: bytes = b""

    @classmethod
    def build(cls, packet_id: int, message: Message | None = None) -> Packet:
        """Create a packet whose payload is the encoded message."""
        payload = message.encode() if message is not None else b""
        return cls(packet_id=packet_id, payload=payload)

    @property
    def length(self) -> int:
        return len(encode_varint(self.packet_id)) + len(self.payload)

    def encode(self) -> bytes:
        """Encode the packet into bytes for transmission."""
        return encode_varint(self.length) + encode_varint(self.packet_id) + self.payload

    @staticmethod
    def decode(raw: bytes) -> dict[str, Any] | None:
        """Decode a packet body (excluding the length prefix).

        The caller is responsible for reading the length prefix and then
        reading exactly that many bytes before passing them here. Fields
        are decoded in layout order, each starting where the previous one
        stopped. Returns None for an empty body.
        """
        if not raw:
            return None

        packet_id, offset = decode_varint(raw)
        kind = InboundPacket.from_id(packet_id)
        log.debug("Decoding %s (%d byte body)", kind.name, len(raw))

        response: dict[str, Any] = {"packet_id": packet_id}
        for name, codec in kind.layout:
            response[name], consumed = codec.decode(raw[offset:])
            offset += consumed
        return response


def build_handshake(
    host: str,
    port: int,
    protocol_version: int = DEFAULT_PROTOCOL_VERSION,
    next_state: NextState = NextState.STATUS,
) -> Packet:
    """Build the handshake packet that opens a connection."""
    message = (
        Message()
        .append(VarInt, protocol_version)
        .append(String, host)
        .append(UnsignedShort, port)
        .append(VarInt, int(next_state))
    )
    return Packet.build(HANDSHAKE_PACKET_ID, message)


def build_status_request() -> Packet:
    """Build the empty status request packet."""
    return Packet.build(STATUS_REQUEST_PACKET_ID)
