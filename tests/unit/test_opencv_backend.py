from __future__ import annotations

import sys
import types

import pytest

from camtcp.camera.backends import opencv


class FakeVideoCapture:
    def __init__(self, opens: bool) -> None:
        self._opens = opens
        self.released = False

    def isOpened(self) -> bool:
        return self._opens and not self.released

    def read(self):
        return True, "frame"

    def release(self) -> None:
        self.released = True


@pytest.fixture
def fake_cv2(monkeypatch: pytest.MonkeyPatch):
    module = types.ModuleType("cv2")
    module.captures = []
    module.opens = True

    def video_capture(index: int) -> FakeVideoCapture:
        capture = FakeVideoCapture(module.opens)
        module.captures.append(capture)
        return capture

    module.VideoCapture = video_capture
    monkeypatch.setitem(sys.modules, "cv2", module)
    monkeypatch.setattr(opencv, "_cv2_available", lambda: True)
    return module


def test_failed_open_releases_capture(fake_cv2) -> None:
    fake_cv2.opens = False
    source = opencv.OpenCVCaptureSource()

    assert source.open(0) is False
    assert fake_cv2.captures[0].released is True
    assert source.is_opened() is False


def test_open_grab_close(fake_cv2) -> None:
    source = opencv.OpenCVCaptureSource()

    assert source.open(2) is True
    assert source.grab_frame() == "frame"
    source.close()

    assert fake_cv2.captures[0].released is True
    assert source.is_opened() is False
    assert source.grab_frame() is None


def test_missing_opencv_fails_open(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(opencv, "_cv2_available", lambda: False)
    assert opencv.OpenCVCaptureSource().open(0) is False
