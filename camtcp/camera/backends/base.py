from __future__ import annotations

from typing import Any, Protocol


class CaptureSource(Protocol):
    """Driver boundary for the shared capture device.

    Only the capture gate calls these, and only while holding its lock.
    """

    name: str

    def open(self, device_index: int) -> bool:
        ...

    def is_opened(self) -> bool:
        ...

    def grab_frame(self) -> Any | None:
        """Grab one raw frame, or ``None`` when the device produced nothing."""
        ...

    def close(self) -> None:
        ...


class FrameEncoder(Protocol):
    name: str

    def encode(self, image: Any) -> bytes:
        """Encode a raw frame for transmission. Empty bytes mean failure."""
        ...


def frame_is_empty(image: Any) -> bool:
    if image is None:
        return True
    size = getattr(image, "size", None)
    if size is not None:
        return size == 0
    try:
        return len(image) == 0
    except TypeError:
        return False
