from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type

from stompwire.client.config import CLIENT_CONFIG
from stompwire.protocol import validator
from stompwire.protocol.errors import ErrorCode, StompConnectionError
from stompwire.protocol.frames import Frame, FrameFactory, StompFrame

from .connection import Connection

logger = logging.getLogger(__name__)

_OPTION_KEYS = ("timeout_sec", "timeout_usec", "can_read_timeout")


class Client:
    """
    Thin facade over a single Connection.

    Only one connection is held at a time; adding another replaces (and
    gracefully closes) the previous one.
    """

    def __init__(
        self,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        connection_class: Type[Connection] = Connection,
        frame_factory: FrameFactory = Frame,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.config = config or CLIENT_CONFIG
        self.connection_class = connection_class
        self.frame_factory = frame_factory
        self._connection: Optional[Connection] = None
        if scheme is not None and host is not None and port is not None:
            self.add_connection(scheme, host, port)

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None, **kwargs: Any) -> "Client":
        """Build a client connected to the scheme/host/port named in config."""
        config = config or CLIENT_CONFIG
        return cls(config["scheme"], config["host"], int(config["port"]), config=config, **kwargs)

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close(graceful=False)

    def add_connection(
        self, scheme: str, host: str, port: int, connection_class: Optional[Type[Connection]] = None
    ) -> bool:
        """Open a connection and keep it on success. Returns whether it was added."""
        cls = connection_class or self.connection_class
        options = {key: self.config[key] for key in _OPTION_KEYS if key in self.config}
        options["frame_factory"] = self.frame_factory
        connection = cls(options)
        try:
            opened = connection.open(scheme, host, port)
        except StompConnectionError as exc:
            logger.warning("Could not add connection to %s://%s:%s: %s", scheme, host, port, exc)
            opened = False

        if not opened:
            connection.close(graceful=False)
            return False

        self.set_connection(connection)
        return True

    def set_connection(self, connection: Connection) -> "Client":
        previous, self._connection = self._connection, connection
        if previous is not None and previous is not connection:
            logger.info("Replacing connection to %s", previous.endpoint)
            previous.close()
        return self

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise StompConnectionError(ErrorCode.NOT_CONNECTED, message="Client has no connection")
        return self._connection

    @property
    def connected(self) -> bool:
        return self._connection is not None and self._connection.is_open

    def send(self, frame: StompFrame) -> "Client":
        if self.config.get("validate_frames", True):
            validator.validate_frame(frame, sender="client")
        self.connection.write(frame)
        return self

    def receive(self) -> Optional[StompFrame]:
        """Return the next frame, or None if none was available."""
        return self.connection.read()

    def can_read(self) -> bool:
        return self.connection.can_read()

    def create_frame(self) -> StompFrame:
        return self.connection.create_frame()

    def close(self, graceful: bool = True) -> None:
        connection, self._connection = self._connection, None
        if connection is not None:
            connection.close(graceful=graceful)


__all__ = ["Client"]
