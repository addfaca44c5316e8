"""
STOMP wire protocol package: commands, frame model, framing codec, errors
and validation helpers. Nothing in here performs I/O.
"""

from .commands import COMMAND_GROUPS, Command, commands_in_group, is_command, normalize_command
from .constants import CONTENT_LENGTH, ENCODING, END_OF_FRAME, EOL, NULL
from .errors import (
    ErrorCode,
    FrameClassError,
    FrameDecodeError,
    FrameValidationError,
    ProtocolError,
    StompConnectionError,
    StompWriteError,
)
from .frames import Frame, FrameFactory, StompFrame
from .framing import (
    content_length_of,
    decode_frame,
    encode_frame,
    extract_body,
    extract_command,
    extract_headers,
)
from .validator import load_schema, validate_command, validate_content_length, validate_frame

__all__ = [
    "Command",
    "COMMAND_GROUPS",
    "commands_in_group",
    "is_command",
    "normalize_command",
    "CONTENT_LENGTH",
    "ENCODING",
    "END_OF_FRAME",
    "EOL",
    "NULL",
    "ErrorCode",
    "ProtocolError",
    "StompConnectionError",
    "StompWriteError",
    "FrameClassError",
    "FrameDecodeError",
    "FrameValidationError",
    "Frame",
    "FrameFactory",
    "StompFrame",
    "encode_frame",
    "decode_frame",
    "extract_command",
    "extract_headers",
    "extract_body",
    "content_length_of",
    "load_schema",
    "validate_command",
    "validate_content_length",
    "validate_frame",
]
