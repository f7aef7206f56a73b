"""Tests for message building and packet framing."""

import json

import pytest

from mcping.errors import PayloadDecodeError, UnknownPacketError, UnsupportedOperationError
from mcping.fields import Json, String, UnsignedShort, VarInt
from mcping.protocol import (
    InboundPacket,
    Message,
    NextState,
    Packet,
    build_handshake,
    build_status_request,
)
from mcping.varint import decode_varint


def _strip_length_prefix(data: bytes) -> bytes:
    """Drop the VarInt length prefix from an encoded packet."""
    _, prefix_size = decode_varint(data)
    return data[prefix_size:]


class TestMessage:
    def test_empty_message(self):
        message = Message()
        assert message.encode() == b""
        assert len(message) == 0

    def test_append_is_chainable(self):
        message = Message().append(VarInt, 1).append(String, "a")
        assert len(message) == 2

    def test_encode_in_append_order(self):
        message = Message().append(UnsignedShort, 1).append(VarInt, 300).append(String, "hi")
        assert message.encode() == b"\x00\x01" + b"\xac\x02" + b"\x02hi"

    def test_fields_record_value_and_size(self):
        message = Message().append(String, "example.com")
        (field,) = list(message)

        assert field.type is String
        assert field.value == "example.com"
        assert field.size == 12

    def test_decode_only_type_rejected(self):
        with pytest.raises(UnsupportedOperationError, match="Json"):
            Message().append(Json, {"a": 1})


class TestPacketEncode:
    def test_handshake_bytes(self):
        packet = build_handshake("example.com", 25565, 498)
        data = packet.encode()

        expected = (
            b"\x12"  # length: 1 + 2 + 12 + 2 + 1
            b"\x00"  # packet id
            b"\xf2\x03"  # protocol version 498
            b"\x0bexample.com"
            b"\x63\xdd"  # port 25565
            b"\x01"  # next state: status
        )
        assert data == expected
        assert packet.length == 18

    def test_handshake_next_state(self):
        packet = build_handshake("a", 1, 498, next_state=NextState.LOGIN)
        assert packet.encode()[-1] == 2

    def test_status_request(self):
        packet = build_status_request()
        assert packet.payload == b""
        assert packet.length == 1
        assert packet.encode() == b"\x01\x00"

    def test_length_excludes_prefix(self):
        payload = b"x" * 200
        packet = Packet(packet_id=0, payload=payload)
        data = packet.encode()

        length, prefix_size = decode_varint(data)
        assert prefix_size == 2
        assert length == 201
        assert len(data) == prefix_size + length

    def test_multi_byte_packet_id(self):
        packet = Packet(packet_id=300)
        assert packet.encode() == b"\x02\xac\x02"

    def test_encode_is_repeatable(self):
        packet = build_handshake("example.com", 25565)
        assert packet.encode() == packet.encode()

    def test_build_from_message(self):
        message = Message().append(String, "hi")
        assert Packet.build(0, message).payload == b"\x02hi"


class TestPacketDecode:
    def test_empty_status_document(self):
        assert Packet.decode(b"\x00\x02{}") == {"packet_id": 0, "data": {}}

    def test_empty_body(self):
        assert Packet.decode(b"") is None

    def test_status_document(self):
        document = {
            "version": {"name": "1.20.4", "protocol": 765},
            "players": {"max": 20, "online": 3},
            "description": {"text": "A Minecraft Server"},
        }
        body = b"\x00" + String.encode(json.dumps(document))

        response = Packet.decode(body)
        assert response["packet_id"] == 0
        assert response["data"] == document

    def test_unknown_packet_id(self):
        with pytest.raises(UnknownPacketError, match="0x01"):
            Packet.decode(b"\x01\x02{}")

    def test_invalid_json_payload(self):
        with pytest.raises(PayloadDecodeError):
            Packet.decode(b"\x00\x02{]")


class TestInboundPacket:
    def test_status_response_layout(self):
        kind = InboundPacket.from_id(0)
        assert kind is InboundPacket.STATUS_RESPONSE
        assert kind.layout == (("data", Json),)

    def test_unregistered(self):
        with pytest.raises(UnknownPacketError):
            InboundPacket.from_id(0x26)


class TestPacketRoundTrip:
    def test_roundtrip(self):
        document = {"description": "§aHello", "players": {"online": 1, "max": 5}}
        message = Message().append(String, json.dumps(document))
        encoded = Packet.build(0, message).encode()

        decoded = Packet.decode(_strip_length_prefix(encoded))
        assert decoded["data"] == document

    def test_roundtrip_unicode(self):
        document = {"description": "Bienvenue éèê ✔"}
        message = Message().append(String, json.dumps(document, ensure_ascii=False))
        encoded = Packet.build(0, message).encode()

        decoded = Packet.decode(_strip_length_prefix(encoded))
        assert decoded["data"] == document
