"""Request token and length-prefixed response framing shared by server and client."""

from __future__ import annotations

import socket
import struct

from camtcp.net.errors import (
    ConnectionReadError,
    ConnectionWriteError,
    FrameTooLarge,
    ProtocolError,
)

TAKE_PHOTO = "TAKE_PHOTO"
_TAKE_PHOTO_BYTES = TAKE_PHOTO.encode("ascii")

LENGTH_PREFIX = struct.Struct("=i")
HEADER_SIZE = LENGTH_PREFIX.size
MAX_PAYLOAD = 2**31 - 1


def is_take_photo(data: bytes) -> bool:
    return data == _TAKE_PHOTO_BYTES


def pack_length(size: int) -> bytes:
    if size < 0 or size > MAX_PAYLOAD:
        raise FrameTooLarge(size)
    return LENGTH_PREFIX.pack(size)


def unpack_length(header: bytes) -> int:
    return LENGTH_PREFIX.unpack(header)[0]


def recv_request(sock: socket.socket, bufsize: int) -> bytes | None:
    """One receive of up to *bufsize* bytes, or ``None`` on end-of-stream."""
    try:
        data = sock.recv(bufsize)
    except OSError as exc:
        raise ConnectionReadError(f"Read error: {exc}") from exc
    if not data:
        return None
    return data


def send_frame(sock: socket.socket, payload: bytes) -> None:
    """Write the length prefix and then the full payload."""
    header = pack_length(len(payload))
    try:
        sock.sendall(header)
        sock.sendall(payload)
    except OSError as exc:
        raise ConnectionWriteError(f"Write error: {exc}") from exc


def send_request(sock: socket.socket, command: str = TAKE_PHOTO) -> None:
    try:
        sock.sendall(command.encode("utf-8"))
    except OSError as exc:
        raise ConnectionWriteError(f"Write error: {exc}") from exc


def recv_exact(sock: socket.socket, n: int) -> bytes | None:
    """Receive exactly *n* bytes, or ``None`` if the peer closes first."""
    buf = bytearray()
    while len(buf) < n:
        chunk = sock.recv(min(n - len(buf), 65536))
        if not chunk:
            return None
        buf.extend(chunk)
    return bytes(buf)


def recv_frame(sock: socket.socket) -> bytes | None:
    """Read one response frame, or ``None`` if the connection closed mid-frame."""
    try:
        header = recv_exact(sock, HEADER_SIZE)
        if header is None:
            return None
        size = unpack_length(header)
        if size < 0:
            raise ProtocolError(f"Negative payload length {size}.")
        return recv_exact(sock, size)
    except TimeoutError:
        raise
    except OSError as exc:
        raise ConnectionReadError(f"Read error: {exc}") from exc
