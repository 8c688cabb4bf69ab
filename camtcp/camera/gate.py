from __future__ import annotations

import threading

from camtcp.camera.backends.base import CaptureSource, FrameEncoder, frame_is_empty
from camtcp.camera.backends.stub import PassthroughEncoder, StubCaptureSource
from camtcp.camera.errors import DeviceOpenFailure, DeviceUnavailable, EmptyFrame
from camtcp.config import ServerConfig
from camtcp.logging.audit import audit_event


class CaptureGate:
    """Serializes every grab+encode on the single shared capture device.

    Handler threads call :meth:`acquire_frame` concurrently; the lock is held
    for the whole grab and encode so no two captures ever interleave.
    """

    def __init__(self, source: CaptureSource, encoder: FrameEncoder):
        self._source = source
        self._encoder = encoder
        self._lock = threading.Lock()
        self._captures = 0
        self._opened = False

    @property
    def source(self) -> CaptureSource:
        return self._source

    @property
    def is_open(self) -> bool:
        return self._source.is_opened()

    @property
    def captures(self) -> int:
        return self._captures

    def open(self, device_index: int) -> None:
        with self._lock:
            opened = self._source.open(device_index)
            self._opened = opened
        audit_event(
            "camera.open",
            backend=self._source.name,
            device_index=device_index,
            result="opened" if opened else "failed",
        )
        if not opened:
            raise DeviceOpenFailure(
                f"Capture device {device_index} ({self._source.name}) could not be opened."
            )

    def acquire_frame(self) -> bytes:
        with self._lock:
            if not self._source.is_opened():
                audit_event("camera.capture", backend=self._source.name, result="unavailable")
                raise DeviceUnavailable()
            image = self._source.grab_frame()
            if frame_is_empty(image):
                audit_event("camera.capture", backend=self._source.name, result="empty_frame")
                raise EmptyFrame()
            payload = self._encoder.encode(image)
            if not payload:
                audit_event("camera.capture", backend=self._source.name, result="encode_failed")
                raise EmptyFrame("Encoder produced no bytes for the captured frame.")
            self._captures += 1
            count = self._captures
        audit_event(
            "camera.capture",
            backend=self._source.name,
            encoder=self._encoder.name,
            result="captured",
            size=len(payload),
            count=count,
        )
        return payload

    def close(self) -> None:
        # release even when the device already reports closed, e.g. after an unplug
        with self._lock:
            self._source.close()
            was_opened, self._opened = self._opened, False
        if was_opened:
            audit_event("camera.close", backend=self._source.name, captures=self._captures)


def build_backend(config: ServerConfig) -> tuple[CaptureSource, FrameEncoder]:
    if config.backend == "stub":
        return StubCaptureSource(), PassthroughEncoder()
    from camtcp.camera.backends.opencv import OpenCVCaptureSource, OpenCVJpegEncoder

    return OpenCVCaptureSource(), OpenCVJpegEncoder()


def build_gate(config: ServerConfig) -> CaptureGate:
    source, encoder = build_backend(config)
    return CaptureGate(source, encoder)
