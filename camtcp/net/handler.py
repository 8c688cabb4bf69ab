from __future__ import annotations

import socket
from enum import Enum
from typing import Any

from camtcp.camera.errors import CaptureError
from camtcp.camera.gate import CaptureGate
from camtcp.config import DEFAULT_RECV_BUFFER
from camtcp.logging.audit import audit_event, safe_excerpt
from camtcp.logging.logger import get_logger
from camtcp.net.errors import ConnectionReadError, ConnectionWriteError, FrameTooLarge
from camtcp.net.protocol import is_take_photo, recv_request, send_frame


class HandlerState(str, Enum):
    READING = "reading"
    DISPATCHING = "dispatching"
    WRITING = "writing"
    CLOSED = "closed"


class ConnectionHandler:
    """Owns one client connection from accept to close.

    Reading -> Dispatching -> Writing -> Reading, until end-of-stream or an
    I/O error moves it to Closed. Capture failures are answered with silence
    and the connection stays open.
    """

    def __init__(
        self,
        conn: socket.socket,
        peer: Any,
        gate: CaptureGate,
        recv_buffer_size: int = DEFAULT_RECV_BUFFER,
    ):
        self._conn = conn
        self._peer = peer
        self._gate = gate
        self._recv_buffer_size = recv_buffer_size
        self._logger = get_logger()
        self.state = HandlerState.READING
        self.close_reason: str | None = None
        self.requests_served = 0
        self.requests_ignored = 0
        self.capture_failures = 0

    def run(self) -> None:
        self._logger.info("Client connected: %s", self._peer)
        audit_event("connection.open", peer=str(self._peer))
        data = b""
        try:
            while self.state is not HandlerState.CLOSED:
                if self.state is HandlerState.READING:
                    data = self._read()
                elif self.state is HandlerState.DISPATCHING:
                    self._dispatch(data)
                elif self.state is HandlerState.WRITING:
                    self._write()
        except Exception:
            self._logger.exception("Unexpected error in handler for %s", self._peer)
            self.close_reason = "error"
        finally:
            self._close()

    def _read(self) -> bytes:
        try:
            data = recv_request(self._conn, self._recv_buffer_size)
        except ConnectionReadError as exc:
            self._logger.warning("%s from %s", exc, self._peer)
            self._transition(HandlerState.CLOSED, reason="read_error")
            return b""
        if data is None:
            self._logger.info("Client disconnected: %s", self._peer)
            self._transition(HandlerState.CLOSED, reason="eof")
            return b""
        self.state = HandlerState.DISPATCHING
        return data

    def _dispatch(self, data: bytes) -> None:
        if is_take_photo(data):
            self._logger.info("Received TAKE_PHOTO request from %s", self._peer)
            self.state = HandlerState.WRITING
            return
        self.requests_ignored += 1
        self._logger.debug("Ignoring request from %s: %r", self._peer, safe_excerpt(data))
        self.state = HandlerState.READING

    def _write(self) -> None:
        try:
            payload = self._gate.acquire_frame()
        except CaptureError as exc:
            self.capture_failures += 1
            self._logger.error("Capture failed for %s: %s", self._peer, exc)
            self.state = HandlerState.READING
            return
        try:
            send_frame(self._conn, payload)
        except FrameTooLarge as exc:
            self.capture_failures += 1
            self._logger.error("Dropping frame for %s: %s", self._peer, exc)
            self.state = HandlerState.READING
            return
        except ConnectionWriteError as exc:
            self._logger.warning("%s to %s", exc, self._peer)
            self._transition(HandlerState.CLOSED, reason="write_error")
            return
        self.requests_served += 1
        self._logger.info("Photo sent to %s (%d bytes)", self._peer, len(payload))
        self.state = HandlerState.READING

    def _transition(self, state: HandlerState, *, reason: str) -> None:
        self.state = state
        self.close_reason = reason

    def _close(self) -> None:
        self.state = HandlerState.CLOSED
        try:
            self._conn.close()
        except OSError as exc:
            self._logger.debug("Error closing connection to %s: %s", self._peer, exc)
        audit_event(
            "connection.close",
            peer=str(self._peer),
            reason=self.close_reason,
            served=self.requests_served,
        )
