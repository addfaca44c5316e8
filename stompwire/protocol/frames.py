from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .commands import Command, normalize_command
from .constants import CONTENT_LENGTH
from .errors import ErrorCode, FrameDecodeError, ProtocolError
from .framing import content_length_of, decode_frame, encode_frame


@runtime_checkable
class StompFrame(Protocol):
    """Capability every frame class must offer to be usable by a Connection."""

    command: Optional[str]
    headers: Dict[str, str]
    body: bytes

    def set_command(self, command: Union[str, Command]) -> Any: ...
    def set_headers(self, headers: Mapping[str, str]) -> Any: ...
    def set_body(self, body: Union[bytes, str]) -> Any: ...
    def to_frame(self) -> bytes: ...


FrameFactory = Callable[[], Any]


class Frame(BaseModel):
    """Built-in frame: command + ordered headers + binary body."""

    model_config = ConfigDict(validate_assignment=True, coerce_numbers_to_str=True)

    command: Optional[str] = Field(default=None, description="STOMP verb such as SEND or MESSAGE")
    headers: Dict[str, str] = Field(default_factory=dict, description="Headers in wire order")
    body: bytes = Field(default=b"", description="Raw body bytes")
    auto_content_length: bool = Field(default=False, description="Write content-length on encode")

    @field_validator("command", mode="before")
    @classmethod
    def _normalize_command(cls, value: Any) -> Any:
        if value is None or not isinstance(value, str):
            return value
        return normalize_command(value)

    def set_command(self, command: Union[str, Command]) -> "Frame":
        self.command = command
        return self

    def set_header(self, key: str, value: Any) -> "Frame":
        self.headers[str(key)] = str(value)
        return self

    def set_headers(self, headers: Mapping[str, Any]) -> "Frame":
        self.headers = dict(headers)
        return self

    def get_header(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(key, default)

    def set_body(self, body: Union[bytes, str]) -> "Frame":
        self.body = body
        return self

    @property
    def content_length(self) -> Optional[int]:
        return content_length_of(self.headers)

    def to_frame(self) -> bytes:
        if not self.command:
            raise ProtocolError(ErrorCode.MALFORMED_FRAME, message="Frame command is not set")
        headers = dict(self.headers)
        if self.auto_content_length:
            headers[CONTENT_LENGTH] = str(len(self.body))
        return encode_frame(self.command, headers, self.body)

    @classmethod
    def from_frame(cls, raw: bytes) -> "Frame":
        command, headers, body = decode_frame(raw)
        try:
            return cls(command=command, headers=headers, body=body)
        except ValidationError as exc:
            raise FrameDecodeError(f"Frame validation failed: {exc}") from exc


__all__ = ["StompFrame", "FrameFactory", "Frame"]
