from __future__ import annotations

import importlib

import pytest

from camtcp.client import PhotoClient
from camtcp.net.listener import Listener


def test_client_cli_writes_photos(running_listener: Listener, tmp_path, capsys) -> None:
    client_main = importlib.import_module("apps.client.main")
    host, port = running_listener.address

    code = client_main.main([host, "--port", str(port), "--count", "2", "--output-dir", str(tmp_path)])

    assert code == 0
    assert (tmp_path / "photo_0.jpg").read_bytes() == b"\xff\xd8first-frame\xff\xd9"
    assert (tmp_path / "photo_1.jpg").read_bytes() == b"\xff\xd8second-frame-is-longer\xff\xd9"
    assert "photo_1.jpg" in capsys.readouterr().out


def test_client_cli_reports_unreachable_server(running_listener: Listener, tmp_path) -> None:
    client_main = importlib.import_module("apps.client.main")
    host, port = running_listener.address
    running_listener.stop()

    code = client_main.main([host, "--port", str(port), "--output-dir", str(tmp_path), "--timeout", "0.5"])

    assert code == 1


def test_photo_client_requires_connect() -> None:
    client = PhotoClient("127.0.0.1", 1)
    assert client.connected is False
    with pytest.raises(RuntimeError):
        client.take_photo()


def test_photo_client_times_out_when_capture_is_silent(running_listener: Listener, gate) -> None:
    gate.close()
    host, port = running_listener.address
    with PhotoClient(host, port, timeout=0.2) as client:
        with pytest.raises(TimeoutError):
            client.take_photo()
