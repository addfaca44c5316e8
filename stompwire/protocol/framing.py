from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

from .constants import CONTENT_LENGTH, ENCODING, END_OF_FRAME, EOL, HEADER_SEPARATOR, NULL
from .errors import ErrorCode, FrameDecodeError, ProtocolError


def encode_frame(command: str, headers: Mapping[str, str], body: bytes = b"") -> bytes:
    """
    Encode a frame into wire bytes:
    COMMAND EOL, one key:value EOL per header (insertion order), EOL, body, NULL.
    Header values are written as given; escaping is left to the caller.
    """
    if not command:
        raise ProtocolError(ErrorCode.MALFORMED_FRAME, message="Frame command is not set")
    lines = [command]
    lines.extend(f"{key}{HEADER_SEPARATOR}{value}" for key, value in headers.items())
    try:
        head = "\n".join(lines).encode(ENCODING)
    except UnicodeEncodeError as exc:
        raise ProtocolError(ErrorCode.MALFORMED_FRAME, message=f"Encode failed: {exc}") from exc
    return head + EOL + EOL + bytes(body) + NULL


def _split_head(raw: bytes) -> Tuple[bytes, Optional[bytes]]:
    """Split raw bytes at the blank line ending the header block (LF or CRLF)."""
    ends = [(raw.find(marker), marker) for marker in (EOL + EOL, EOL + b"\r" + EOL)]
    found = [(pos, marker) for pos, marker in ends if pos != -1]
    if not found:
        return raw, None
    pos, marker = min(found)
    return raw[:pos], raw[pos + len(marker) :]


def _header_block(raw: bytes) -> list[str]:
    head, _ = _split_head(raw)
    try:
        text = head.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise FrameDecodeError(f"Decode failed: {exc}") from exc
    # STOMP 1.2 allows CRLF line ends
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def extract_command(raw: bytes) -> str:
    """Return the first line of a raw frame."""
    command = _header_block(raw)[0]
    if not command:
        raise FrameDecodeError("Missing command line")
    return command


def extract_headers(raw: bytes) -> Dict[str, str]:
    """
    Parse the header lines that follow the command, up to the first blank line.
    Each line is split at its first colon; a line without one is rejected.
    """
    headers: Dict[str, str] = {}
    for line in _header_block(raw)[1:]:
        if line == "":
            break
        key, sep, value = line.partition(HEADER_SEPARATOR)
        if not sep:
            raise FrameDecodeError(f"Malformed header line: {line!r}")
        headers[key] = value
    return headers


def content_length_of(headers: Mapping[str, str]) -> Optional[int]:
    """Return the declared body length, or None when the header is absent."""
    value = headers.get(CONTENT_LENGTH)
    if value is None:
        return None
    try:
        length = int(value.strip())
    except ValueError as exc:
        raise FrameDecodeError(f"Invalid {CONTENT_LENGTH}: {value!r}") from exc
    if length < 0:
        raise FrameDecodeError(f"Invalid {CONTENT_LENGTH}: {value!r}")
    return length


def extract_body(raw: bytes, content_length: Optional[int] = None) -> bytes:
    """
    Return the bytes after the header block.
    With a declared length exactly that many bytes are kept, so embedded NULs survive.
    """
    _, body = _split_head(raw)
    if body is None:
        return b""
    if content_length is not None:
        return body[:content_length]
    if body.endswith(END_OF_FRAME):
        return body[: -len(END_OF_FRAME)]
    if body.endswith(NULL):
        return body[:-1]
    return body


def decode_frame(raw: bytes) -> Tuple[str, Dict[str, str], bytes]:
    """Decode wire bytes into (command, headers, body)."""
    command = extract_command(raw)
    headers = extract_headers(raw)
    body = extract_body(raw, content_length_of(headers))
    return command, headers, body


__all__ = [
    "encode_frame",
    "extract_command",
    "extract_headers",
    "extract_body",
    "content_length_of",
    "decode_frame",
]
