"""Status query client: handshake, status request, status response."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from mcping.errors import FramingError
from mcping.protocol import (
    DEFAULT_PROTOCOL_VERSION,
    Packet,
    build_handshake,
    build_status_request,
)
from mcping.status import ServerStatus
from mcping.transport import SocketTransport
from mcping.varint import MAX_VARINT_BYTES, decode_varint, varint_decodable

if TYPE_CHECKING:
    from collections.abc import Callable

    from mcping.transport import Transport

    TransportFactory = Callable[[str, int, float], Transport]

log = logging.getLogger(__name__)

DEFAULT_PORT = 25565


class SessionState(Enum):
    """Progress of a single status query."""

    IDLE = "idle"
    CONNECTED = "connected"
    HANDSHAKE_SENT = "handshake_sent"
    STATUS_REQUESTED = "status_requested"
    STATUS_RECEIVED = "status_received"
    FAILED = "failed"


@dataclass(frozen=True)
class ConnectionContext:
    """Where and how a status query connects."""

    host: str
    port: int = DEFAULT_PORT
    protocol_version: int = DEFAULT_PROTOCOL_VERSION


def read_packet_raw(transport: Transport) -> bytes:
    """Read one framed packet body (without its length prefix).

    The length prefix is scanned one byte at a time since its size is only
    known once a byte without the continuation bit arrives, then exactly
    that many bytes are read.
    """
    prefix = bytearray()
    while not varint_decodable(prefix):
        if len(prefix) == MAX_VARINT_BYTES:
            msg = f"Packet length prefix longer than {MAX_VARINT_BYTES} bytes"
            raise FramingError(msg)
        byte = transport.read_byte()
        if byte is None:
            msg = "Connection closed while reading packet length"
            raise FramingError(msg)
        prefix.append(byte)

    length, _ = decode_varint(prefix)
    if length < 0:
        msg = f"Negative packet length: {length}"
        raise FramingError(msg)
    log.debug("Reading packet body of %d bytes", length)
    if length == 0:
        return b""
    return transport.read_exact(length)


class StatusClient:
    """Runs one status query against a server.

    A client moves through SessionState in a single linear pass and ends
    in STATUS_RECEIVED or FAILED. It is not reusable.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        protocol_version: int = DEFAULT_PROTOCOL_VERSION,
        timeout: float = 10.0,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self.context = ConnectionContext(
            host=host, port=port, protocol_version=protocol_version
        )
        self.timeout = timeout
        self.state = SessionState.IDLE
        self._transport_factory = transport_factory or SocketTransport.open
        self._transport: Transport | None = None

    def fetch_status(self) -> Any:
        """Perform the exchange and return the decoded status document.

        Any error marks the client FAILED and propagates unchanged. The
        connection is closed either way.
        """
        if self.state is not SessionState.IDLE:
            msg = f"Status query already run (state: {self.state.value})"
            raise RuntimeError(msg)

        try:
            self._connect()
            self._send_handshake()
            self._send_status_request()
            return self._receive_status()
        except Exception:
            self._set_state(SessionState.FAILED)
            raise
        finally:
            self.close()

    def close(self) -> None:
        """Close the underlying transport, if open."""
        if self._transport is not None:
            self._transport.close()
            self._transport = None

    def _connect(self) -> None:
        ctx = self.context
        self._transport = self._transport_factory(ctx.host, ctx.port, self.timeout)
        self._set_state(SessionState.CONNECTED)

    def _send_handshake(self) -> None:
        ctx = self.context
        self._send(build_handshake(ctx.host, ctx.port, ctx.protocol_version))
        self._set_state(SessionState.HANDSHAKE_SENT)

    def _send_status_request(self) -> None:
        self._send(build_status_request())
        self._set_state(SessionState.STATUS_REQUESTED)

    def _receive_status(self) -> Any:
        response = Packet.decode(read_packet_raw(self._transport))
        if response is None:
            msg = "Server sent an empty packet"
            raise FramingError(msg)
        self._set_state(SessionState.STATUS_RECEIVED)
        return response["data"]

    def _send(self, packet: Packet) -> None:
        """Send an encoded packet over the transport."""
        data = packet.encode()
        log.debug("Sending packet 0x%02X (%d bytes)", packet.packet_id, len(data))
        self._transport.write(data)

    def _set_state(self, state: SessionState) -> None:
        log.debug("%s -> %s", self.state.name, state.name)
        self.state = state


def query_status(
    host: str,
    port: int = DEFAULT_PORT,
    *,
    protocol_version: int = DEFAULT_PROTOCOL_VERSION,
    timeout: float = 10.0,
) -> ServerStatus:
    """Query a server and return its parsed status."""
    client = StatusClient(
        host, port, protocol_version=protocol_version, timeout=timeout
    )
    return ServerStatus.from_document(client.fetch_status())
