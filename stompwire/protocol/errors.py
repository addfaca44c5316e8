from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Error codes carried by every ProtocolError."""

    CONNECT_FAILED = 1001
    UNSUPPORTED_SCHEME = 1002
    NOT_CONNECTED = 1003
    READ_TIMEOUT = 1004
    WRITE_FAILED = 1005
    INVALID_FRAME_CLASS = 1006
    MALFORMED_FRAME = 1007
    INVALID_FRAME = 1008


class ProtocolError(Exception):
    """Structured exception carrying an error code + message."""

    def __init__(self, code: ErrorCode, message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code.name} ({int(code)}): {message}")


class StompConnectionError(ProtocolError):
    """Connection could not be established, is not open, or timed out."""

    def __init__(self, code: ErrorCode, message: str = "", endpoint: Optional[str] = None) -> None:
        self.endpoint = endpoint
        super().__init__(code, message)


class StompWriteError(ProtocolError):
    """Bytes could not be written to an open connection."""

    pass


class FrameClassError(ProtocolError):
    """The configured frame factory does not build StompFrame objects."""

    pass


class FrameDecodeError(ProtocolError):
    """Raw bytes could not be parsed into command/headers/body."""

    def __init__(self, message: str = "") -> None:
        super().__init__(ErrorCode.MALFORMED_FRAME, message)


class FrameValidationError(ProtocolError):
    """A frame is well formed but misses headers its command requires."""

    def __init__(self, message: str = "") -> None:
        super().__init__(ErrorCode.INVALID_FRAME, message)


__all__ = [
    "ErrorCode",
    "ProtocolError",
    "StompConnectionError",
    "StompWriteError",
    "FrameClassError",
    "FrameDecodeError",
    "FrameValidationError",
]
