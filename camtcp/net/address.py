from __future__ import annotations

import socket

from camtcp.logging.logger import get_logger
from camtcp.net.errors import AddressResolutionError

ADDRESS_UNKNOWN = "unknown"


def resolve_local_ipv4() -> str:
    """Return the first IPv4 address the local host name resolves to."""
    hostname = socket.gethostname()
    try:
        infos = socket.getaddrinfo(hostname, None, socket.AF_INET, socket.SOCK_STREAM)
    except OSError as exc:
        raise AddressResolutionError(f"Could not resolve {hostname!r}: {exc}") from exc
    for family, _, _, _, sockaddr in infos:
        if family == socket.AF_INET:
            return sockaddr[0]
    raise AddressResolutionError(f"No IPv4 address found for {hostname!r}.")


def get_local_ipv4_address() -> str:
    try:
        return resolve_local_ipv4()
    except AddressResolutionError as exc:
        get_logger().warning("Error getting local IP address: %s", exc)
        return ADDRESS_UNKNOWN
