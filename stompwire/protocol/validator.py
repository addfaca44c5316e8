from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

import jsonschema

from .commands import Command, commands_in_group, is_command, normalize_command
from .constants import NULL
from .errors import FrameDecodeError, FrameValidationError
from .framing import content_length_of


def _requires(*names: str) -> dict:
    return {
        "type": "object",
        "required": ["command", "headers"],
        "properties": {
            "command": {"type": "string", "minLength": 1},
            "headers": {
                "type": "object",
                "required": list(names),
                "additionalProperties": {"type": "string"},
            },
        },
    }


# Mapping command -> headers it must carry (STOMP 1.2)
SCHEMA_REGISTRY: Dict[str, dict] = {
    Command.SEND.value: _requires("destination"),
    Command.SUBSCRIBE.value: _requires("destination", "id"),
    Command.UNSUBSCRIBE.value: _requires("id"),
    Command.ACK.value: _requires("id"),
    Command.NACK.value: _requires("id"),
    Command.BEGIN.value: _requires("transaction"),
    Command.COMMIT.value: _requires("transaction"),
    Command.ABORT.value: _requires("transaction"),
    Command.MESSAGE.value: _requires("destination", "message-id", "subscription"),
    Command.RECEIPT.value: _requires("receipt-id"),
}


@lru_cache(maxsize=16)
def load_schema(command: str) -> Optional[dict]:
    """Return the JSON schema for command if one is registered."""
    return SCHEMA_REGISTRY.get(normalize_command(command))


def validate_command(command: Optional[str], sender: Optional[str] = None) -> None:
    """Command must be known and, when `sender` is given, one that side may send."""
    if not command:
        raise FrameValidationError("Frame command is not set")
    if not is_command(command):
        raise FrameValidationError(f"Unknown command {command!r}")
    if sender is not None and command not in commands_in_group(sender):
        raise FrameValidationError(f"{command} frames are not sent by the {sender}")


def validate_content_length(frame: Any) -> None:
    """A declared content-length must match the body; without one the body may not hold NUL."""
    try:
        declared = content_length_of(frame.headers)
    except FrameDecodeError as exc:
        raise FrameValidationError(exc.message) from exc
    body = bytes(frame.body or b"")
    if declared is None:
        if NULL in body and not getattr(frame, "auto_content_length", False):
            raise FrameValidationError("Body contains NUL bytes but no content-length is declared")
        return
    if declared != len(body):
        raise FrameValidationError(f"content-length {declared} does not match body length {len(body)}")


def validate_frame(frame: Any, schema: Optional[dict] = None, sender: Optional[str] = None) -> None:
    """Run standard validations (command + json-schema + content-length)."""
    validate_command(frame.command, sender)
    if not schema:
        schema = load_schema(frame.command)
    if schema:
        instance = {"command": frame.command, "headers": dict(frame.headers)}
        try:
            jsonschema.validate(instance=instance, schema=schema)
        except jsonschema.ValidationError as exc:
            raise FrameValidationError(f"Schema validation failed: {exc.message}") from exc
    validate_content_length(frame)


__all__ = ["SCHEMA_REGISTRY", "load_schema", "validate_command", "validate_content_length", "validate_frame"]
