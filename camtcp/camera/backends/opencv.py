from __future__ import annotations

import importlib
import importlib.util
from typing import Any

from camtcp.camera.backends.base import CaptureSource, FrameEncoder
from camtcp.logging.logger import get_logger


def _cv2_available() -> bool:
    return importlib.util.find_spec("cv2") is not None


class OpenCVCaptureSource(CaptureSource):
    name = "opencv"

    def __init__(self) -> None:
        self._capture = None

    def open(self, device_index: int) -> bool:
        if not _cv2_available():
            get_logger().error("OpenCV is not installed; cannot open device %s", device_index)
            return False
        cv2 = importlib.import_module("cv2")
        capture = cv2.VideoCapture(device_index)
        if not capture.isOpened():
            capture.release()
            return False
        self._capture = capture
        return True

    def is_opened(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def grab_frame(self) -> Any | None:
        if self._capture is None:
            return None
        success, frame = self._capture.read()
        if not success:
            return None
        return frame

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None


class OpenCVJpegEncoder(FrameEncoder):
    name = "jpeg"

    def encode(self, image: Any) -> bytes:
        cv2 = importlib.import_module("cv2")
        success, buffer = cv2.imencode(".jpg", image)
        if not success:
            return b""
        return buffer.tobytes()
