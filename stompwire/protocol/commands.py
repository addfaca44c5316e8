from __future__ import annotations

from enum import StrEnum
from typing import Dict, Iterable, Union


class Command(StrEnum):
    """
    STOMP verbs understood by the codec.
    Frames may still carry any non-empty command text; these are the known ones.
    """

    # Client frames
    CONNECT = "CONNECT"
    STOMP = "STOMP"
    SEND = "SEND"
    SUBSCRIBE = "SUBSCRIBE"
    UNSUBSCRIBE = "UNSUBSCRIBE"
    ACK = "ACK"
    NACK = "NACK"
    BEGIN = "BEGIN"
    COMMIT = "COMMIT"
    ABORT = "ABORT"
    DISCONNECT = "DISCONNECT"

    # Server frames
    CONNECTED = "CONNECTED"
    MESSAGE = "MESSAGE"
    RECEIPT = "RECEIPT"
    ERROR = "ERROR"


COMMAND_GROUPS: Dict[str, str] = {
    Command.CONNECT.value: "client",
    Command.STOMP.value: "client",
    Command.SEND.value: "client",
    Command.SUBSCRIBE.value: "client",
    Command.UNSUBSCRIBE.value: "client",
    Command.ACK.value: "client",
    Command.NACK.value: "client",
    Command.BEGIN.value: "client",
    Command.COMMIT.value: "client",
    Command.ABORT.value: "client",
    Command.DISCONNECT.value: "client",
    Command.CONNECTED.value: "server",
    Command.MESSAGE.value: "server",
    Command.RECEIPT.value: "server",
    Command.ERROR.value: "server",
}


def normalize_command(command: Union[str, Command]) -> str:
    """Convert enum/string into canonical command text."""
    return command.value if isinstance(command, Command) else str(command)


def is_command(value: str) -> bool:
    """Check if `value` is a known command."""
    try:
        Command(value)
        return True
    except ValueError:
        return False


def commands_in_group(group: str) -> Iterable[str]:
    """Yield commands sent by the given side ("client" or "server")."""
    for command, grp in COMMAND_GROUPS.items():
        if grp == group:
            yield command


__all__ = [
    "Command",
    "COMMAND_GROUPS",
    "normalize_command",
    "is_command",
    "commands_in_group",
]
