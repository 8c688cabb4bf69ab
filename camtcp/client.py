"""Client for the capture service; a failed capture surfaces as a socket timeout."""

from __future__ import annotations

import socket

from camtcp.config import DEFAULT_PORT
from camtcp.net.errors import ConnectionReadError
from camtcp.net.protocol import TAKE_PHOTO, recv_frame, send_request


class PhotoClient:
    """Persistent connection to a capture server."""

    def __init__(self, server_ip: str, server_port: int = DEFAULT_PORT, timeout: float | None = 10.0):
        self.server_address = (server_ip, server_port)
        self.timeout = timeout
        self._sock: socket.socket | None = None

    def __enter__(self) -> "PhotoClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        self._sock = socket.create_connection(self.server_address, timeout=self.timeout)

    def disconnect(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    def take_photo(self) -> bytes:
        """Request one frame; raises TimeoutError when the server stays silent."""
        sock = self._require_sock()
        send_request(sock, TAKE_PHOTO)
        payload = recv_frame(sock)
        if payload is None:
            raise ConnectionReadError("Server closed the connection mid-frame.")
        return payload

    def _require_sock(self) -> socket.socket:
        if self._sock is None:
            raise RuntimeError("PhotoClient is not connected; call connect() first.")
        return self._sock
