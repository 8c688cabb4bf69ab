from __future__ import annotations


class NetworkError(Exception):
    pass


class ConnectionReadError(NetworkError):
    def __init__(self, message: str = "Failed to read from client connection."):
        super().__init__(message)


class ConnectionWriteError(NetworkError):
    def __init__(self, message: str = "Failed to write to client connection."):
        super().__init__(message)


class AcceptError(NetworkError):
    def __init__(self, message: str = "Failed to accept an incoming connection."):
        super().__init__(message)


class ListenerBindError(NetworkError):
    def __init__(self, message: str = "Failed to bind the listening socket."):
        super().__init__(message)


class AddressResolutionError(NetworkError):
    def __init__(self, message: str = "Failed to resolve the local IPv4 address."):
        super().__init__(message)


class ProtocolError(NetworkError):
    pass


class FrameTooLarge(ProtocolError):
    def __init__(self, size: int):
        super().__init__(f"Payload of {size} bytes does not fit the int32 length prefix.")
        self.size = size
