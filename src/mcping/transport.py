"""Blocking TCP byte-stream transport."""

from __future__ import annotations

import contextlib
import logging
import socket
from typing import Protocol

from mcping.errors import ConnectionError, FramingError

log = logging.getLogger(__name__)


class Transport(Protocol):
    """The byte-stream operations the status exchange needs."""

    def write(self, data: bytes) -> None: ...

    def read_byte(self) -> int | None: ...

    def read_exact(self, num_bytes: int) -> bytes: ...

    def close(self) -> None: ...


class SocketTransport:
    """A TCP connection to a Minecraft server."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock: socket.socket | None = sock

    @classmethod
    def open(cls, host: str, port: int, timeout: float = 10.0) -> SocketTransport:
        """Establish a TCP connection to the server."""
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except TimeoutError as e:
            msg = f"Timed out connecting to {host}:{port}"
            raise ConnectionError(msg) from e
        except OSError as e:
            msg = f"Failed to connect to {host}:{port}: {e}"
            raise ConnectionError(msg) from e
        log.debug("Connected to %s:%d", host, port)
        return cls(sock)

    @property
    def connected(self) -> bool:
        """Whether the transport still holds an open socket."""
        return self._sock is not None

    def close(self) -> None:
        """Close the TCP connection."""
        if self._sock is not None:
            with contextlib.suppress(OSError):
                self._sock.close()
            self._sock = None

    def write(self, data: bytes) -> None:
        """Send all of ``data``."""
        sock = self._require_socket()
        try:
            sock.sendall(data)
        except OSError as e:
            self.close()
            msg = f"Failed to send data: {e}"
            raise ConnectionError(msg) from e

    def read_byte(self) -> int | None:
        """Read a single byte, or None if the server closed the stream."""
        chunk = self._recv(1)
        if not chunk:
            return None
        return chunk[0]

    def read_exact(self, num_bytes: int) -> bytes:
        """Read exactly num_bytes from the socket, handling partial reads."""
        data = bytearray()
        while len(data) < num_bytes:
            chunk = self._recv(num_bytes - len(data))
            if not chunk:
                self.close()
                msg = (
                    f"Connection closed after {len(data)} of {num_bytes} "
                    "expected bytes"
                )
                raise FramingError(msg)
            data.extend(chunk)

        return bytes(data)

    def _recv(self, num_bytes: int) -> bytes:
        sock = self._require_socket()
        try:
            return sock.recv(num_bytes)
        except TimeoutError as e:
            self.close()
            msg = "Timed out waiting for the server"
            raise ConnectionError(msg) from e
        except OSError as e:
            self.close()
            msg = f"Connection lost: {e}"
            raise ConnectionError(msg) from e

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            msg = "Not connected"
            raise ConnectionError(msg)
        return self._sock
