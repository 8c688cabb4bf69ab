from __future__ import annotations

import sys
import threading
import time
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from camtcp.camera.backends.stub import PassthroughEncoder, StubCaptureSource  # noqa: E402
from camtcp.camera.gate import CaptureGate  # noqa: E402
from camtcp.net.listener import Listener  # noqa: E402


class RecordingSource(StubCaptureSource):
    """Stub device that records how many grabs overlap in time."""

    def __init__(self, frames=None, *, grab_delay: float = 0.05, available: bool = True):
        super().__init__(frames, available=available)
        self.grab_delay = grab_delay
        self.in_flight = 0
        self.max_in_flight = 0
        self._counter_lock = threading.Lock()

    def grab_frame(self):
        with self._counter_lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.grab_delay)
            return super().grab_frame()
        finally:
            with self._counter_lock:
                self.in_flight -= 1


FRAMES = [b"\xff\xd8first-frame\xff\xd9", b"\xff\xd8second-frame-is-longer\xff\xd9"]


@pytest.fixture
def recording_source() -> RecordingSource:
    return RecordingSource(FRAMES)


@pytest.fixture
def gate(recording_source: RecordingSource):
    capture_gate = CaptureGate(recording_source, PassthroughEncoder())
    capture_gate.open(0)
    yield capture_gate
    capture_gate.close()


@pytest.fixture
def running_listener(gate: CaptureGate):
    listener = Listener("127.0.0.1", 0, gate)
    listener.bind()
    thread = threading.Thread(target=listener.serve_forever, daemon=True)
    thread.start()
    yield listener
    listener.stop()
    thread.join(timeout=2.0)
    listener.join_handlers(timeout=2.0)
