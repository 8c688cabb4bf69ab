from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PORT = 12345
DEFAULT_RECV_BUFFER = 1024
BACKENDS = {"opencv", "stub"}


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    device_index: int
    backend: str
    recv_buffer_size: int
    backlog: int
    log_level: str


def _parse_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_port(value: str | None, default: int) -> int:
    port = _parse_int(value, default)
    if not 0 <= port <= 65535:
        return default
    return port


def _parse_positive(value: str | None, default: int) -> int:
    parsed = _parse_int(value, default)
    return parsed if parsed > 0 else default


def get_server_config() -> ServerConfig:
    host = os.getenv("CAMTCP_HOST", "0.0.0.0").strip() or "0.0.0.0"
    backend = os.getenv("CAMTCP_BACKEND", "opencv").strip().lower()
    if backend not in BACKENDS:
        backend = "opencv"
    return ServerConfig(
        host=host,
        port=_parse_port(os.getenv("CAMTCP_PORT"), DEFAULT_PORT),
        device_index=_parse_int(os.getenv("CAMTCP_DEVICE_INDEX"), 0),
        backend=backend,
        recv_buffer_size=_parse_positive(os.getenv("CAMTCP_RECV_BUFFER"), DEFAULT_RECV_BUFFER),
        backlog=_parse_positive(os.getenv("CAMTCP_BACKLOG"), 5),
        log_level=os.getenv("CAMTCP_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
