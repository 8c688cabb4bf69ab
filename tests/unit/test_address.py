from __future__ import annotations

import socket

import pytest

from camtcp.net import address
from camtcp.net.errors import AddressResolutionError


def test_returns_first_ipv4(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_getaddrinfo(host, port, family=0, type=0):
        return [
            (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.168.1.20", 0)),
            (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("10.0.0.5", 0)),
        ]

    monkeypatch.setattr(address.socket, "getaddrinfo", fake_getaddrinfo)
    assert address.get_local_ipv4_address() == "192.168.1.20"


def test_resolution_failure_degrades_to_sentinel(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_getaddrinfo(*args, **kwargs):
        raise socket.gaierror("name or service not known")

    monkeypatch.setattr(address.socket, "getaddrinfo", fake_getaddrinfo)
    with pytest.raises(AddressResolutionError):
        address.resolve_local_ipv4()
    assert address.get_local_ipv4_address() == address.ADDRESS_UNKNOWN


def test_no_ipv4_result_degrades_to_sentinel(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(address.socket, "getaddrinfo", lambda *args, **kwargs: [])
    assert address.get_local_ipv4_address() == address.ADDRESS_UNKNOWN
