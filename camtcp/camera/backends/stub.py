from __future__ import annotations

import base64
import itertools
from typing import Iterable

from camtcp.camera.backends.base import CaptureSource, FrameEncoder

_PLACEHOLDER_JPEG_BASE64 = (
    "/9j/4AAQSkZJRgABAQEASABIAAD/2wBDAP//////////////////////////////////////////////////////////////////////////////////////"
    "2wBDAf//////////////////////////////////////////////////////////////////////////////////////wAARCAABAAEDASIAAhEBAxEB/"
    "8QAFQABAQAAAAAAAAAAAAAAAAAAAAf/xAAUEAEAAAAAAAAAAAAAAAAAAAAA/9oADAMBAAIQAxAAAAGb/8QAFBAB"
    "AAAAAAAAAAAAAAAAAAAAAP/aAAgBAQABBQJ//8QAFBEBAAAAAAAAAAAAAAAAAAAAAP/aAAgBAwEBPwF//8QAFB"
    "EBAAAAAAAAAAAAAAAAAAAAAP/aAAgBAgEBPwF//8QAFBABAAAAAAAAAAAAAAAAAAAAAP/aAAgBAQAGPwJ//8QAF"
    "BABAAAAAAAAAAAAAAAAAAAAAP/aAAgBAQABPyF//9k="
)
PLACEHOLDER_JPEG = base64.b64decode(_PLACEHOLDER_JPEG_BASE64)


class StubCaptureSource(CaptureSource):
    """In-memory capture device that cycles through canned frames."""

    name = "stub"

    def __init__(self, frames: Iterable[bytes] | None = None, *, available: bool = True):
        self._frames = list(frames) if frames is not None else [PLACEHOLDER_JPEG]
        self._cycle = itertools.cycle(self._frames)
        self._available = available
        self._opened = False
        self.grabs = 0

    def open(self, device_index: int) -> bool:
        self._opened = self._available
        return self._opened

    def is_opened(self) -> bool:
        return self._opened

    def grab_frame(self) -> bytes | None:
        if not self._opened:
            return None
        self.grabs += 1
        return next(self._cycle)

    def close(self) -> None:
        self._opened = False


class PassthroughEncoder(FrameEncoder):
    name = "passthrough"

    def encode(self, image: bytes) -> bytes:
        return bytes(image)
