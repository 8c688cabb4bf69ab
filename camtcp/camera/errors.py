from __future__ import annotations


class CaptureError(Exception):
    def __init__(self, message: str, *, fatal: bool = False):
        super().__init__(message)
        self.fatal = fatal


class DeviceOpenFailure(CaptureError):
    def __init__(self, message: str = "Capture device could not be opened."):
        super().__init__(message, fatal=True)


class DeviceUnavailable(CaptureError):
    def __init__(self, message: str = "Capture device is not open."):
        super().__init__(message)


class EmptyFrame(CaptureError):
    def __init__(self, message: str = "Capture device returned an empty frame."):
        super().__init__(message)
