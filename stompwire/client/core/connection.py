from __future__ import annotations

import logging
import select
import socket
from typing import Any, Mapping, NoReturn, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from stompwire.client.config import ConfigError
from stompwire.protocol.commands import Command
from stompwire.protocol.constants import (
    CAN_READ_TIMEOUT,
    END_OF_FRAME,
    EOL,
    READ_TIMEOUT_DEFAULT_SEC,
    READ_TIMEOUT_DEFAULT_USEC,
    RECV_CHUNK_SIZE,
)
from stompwire.protocol.errors import (
    ErrorCode,
    FrameClassError,
    StompConnectionError,
    StompWriteError,
)
from stompwire.protocol.frames import Frame, FrameFactory, StompFrame
from stompwire.protocol.framing import content_length_of, extract_body, extract_command, extract_headers

logger = logging.getLogger(__name__)

MAX_DATAGRAM_SIZE = 65535


class ConnectionOptions(BaseModel):
    """Options recognized by Connection.open(); unknown keys are kept as-is."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    timeout_sec: int = Field(default=READ_TIMEOUT_DEFAULT_SEC, ge=0, description="Read timeout, seconds part")
    timeout_usec: int = Field(default=READ_TIMEOUT_DEFAULT_USEC, ge=0, le=999_999, description="Read timeout, microseconds part")
    can_read_timeout: float = Field(default=CAN_READ_TIMEOUT, ge=0, description="Poll interval of can_read()")
    frame_factory: FrameFactory = Field(default=Frame, description="Builds empty frames")

    @model_validator(mode="after")
    def _check_timeout(self) -> "ConnectionOptions":
        # settimeout(0) would switch the socket to non-blocking mode
        if self.timeout_sec == 0 and self.timeout_usec == 0:
            raise ValueError("read timeout must be positive")
        return self

    @property
    def timeout(self) -> float:
        return self.timeout_sec + self.timeout_usec / 1_000_000


OptionsLike = Union[ConnectionOptions, Mapping[str, Any], None]


def _build_options(options: OptionsLike) -> ConnectionOptions:
    if isinstance(options, ConnectionOptions):
        return options.model_copy()
    try:
        return ConnectionOptions(**dict(options or {}))
    except ValidationError as exc:
        raise ConfigError(f"Invalid connection options: {exc}") from exc


class Connection:
    """
    Owns a single socket to a STOMP broker.

    Frames are written with write() and read back with read(). Reading is
    line based for the command and header block, then either scans for the
    NUL EOL end-of-frame marker or, when content-length is declared, reads
    exactly that many body bytes plus the trailing marker.

    Used as a context manager the connection is released without sending
    DISCONNECT; call close() for a graceful shutdown.
    """

    def __init__(self, options: OptionsLike = None) -> None:
        self.options = _build_options(options)
        self.endpoint: Optional[str] = None
        self._socket: Optional[socket.socket] = None
        self._recv_buffer = bytearray()
        self._eof = False

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close(graceful=False)

    @property
    def is_open(self) -> bool:
        return self._socket is not None

    @property
    def frame_factory(self) -> FrameFactory:
        return self.options.frame_factory

    @frame_factory.setter
    def frame_factory(self, factory: FrameFactory) -> None:
        self.options.frame_factory = factory

    def open(self, scheme: str, host: str, port: int, options: OptionsLike = None) -> bool:
        """Open a socket to scheme://host:port and apply the read timeout."""
        if options is not None:
            merged = self.options.model_dump()
            merged.update(options.model_dump() if isinstance(options, ConnectionOptions) else options)
            effective = _build_options(merged)
        else:
            effective = self.options

        if self._socket is not None:
            logger.debug("Re-opening connection to %s, releasing the previous socket", self.endpoint)
            self._release()

        endpoint = f"{scheme}://{host}:{port}"
        try:
            sock = self._connect(scheme, host, int(port), effective.timeout)
        except (OSError, UnicodeError, ValueError) as exc:
            detail = f"{exc.strerror or exc} (errno = {exc.errno})" if isinstance(exc, OSError) else str(exc)
            raise StompConnectionError(
                ErrorCode.CONNECT_FAILED,
                message=f"Unable to connect to {endpoint}; error = {detail}",
                endpoint=endpoint,
            ) from exc

        sock.settimeout(effective.timeout)
        self._socket = sock
        self._recv_buffer.clear()
        self._eof = False
        self.options = effective
        self.endpoint = endpoint
        logger.info("Connected to %s", endpoint)
        return True

    @staticmethod
    def _connect(scheme: str, host: str, port: int, timeout: float) -> socket.socket:
        if scheme == "tcp":
            return socket.create_connection((host, port), timeout=timeout)
        if scheme == "udp":
            family, sock_type, proto, _, address = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
            sock = socket.socket(family, sock_type, proto)
            try:
                sock.connect(address)
            except OSError:
                sock.close()
                raise
            return sock
        raise StompConnectionError(
            ErrorCode.UNSUPPORTED_SCHEME,
            message=f"Unsupported scheme {scheme!r}; expected tcp or udp",
            endpoint=f"{scheme}://{host}:{port}",
        )

    def close(self, graceful: bool = True) -> None:
        """
        Close the connection. A graceful close first sends DISCONNECT, best effort.
        Never raises; closing twice is a no-op.
        """
        if self._socket is None:
            return
        try:
            if graceful:
                frame = self.create_frame()
                frame.set_command(Command.DISCONNECT)
                self.write(frame)
        except Exception as exc:
            logger.warning("Could not send DISCONNECT to %s: %s", self.endpoint, exc)
        finally:
            self._release()
        logger.info("Connection to %s closed", self.endpoint)

    def _release(self) -> None:
        sock, self._socket = self._socket, None
        self._recv_buffer.clear()
        self._eof = False
        if sock is None:
            return
        try:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            sock.close()
        except OSError as exc:
            logger.debug("Ignoring error while closing socket to %s: %s", self.endpoint, exc)

    def ping(self) -> bool:
        """Check whether we hold an open socket."""
        if self._socket is None:
            raise StompConnectionError(
                ErrorCode.NOT_CONNECTED, message="Not connected to Stomp server", endpoint=self.endpoint
            )
        return True

    def write(self, frame: StompFrame) -> "Connection":
        """
        Write a frame to the broker.

        example: response = connection.write(frame).read()
        """
        self.ping()
        data = frame.to_frame()
        view = memoryview(data)
        sent = 0
        try:
            while sent < len(data):
                count = self._socket.send(view[sent:])
                if count == 0:
                    break
                sent += count
        except OSError as exc:
            self._release()
            raise StompWriteError(ErrorCode.WRITE_FAILED, message=f"No bytes written: {exc}") from exc

        if sent == 0:
            self._release()
            raise StompWriteError(ErrorCode.WRITE_FAILED, message="No bytes written")
        if sent < len(data):
            self._release()
            raise StompWriteError(ErrorCode.WRITE_FAILED, message=f"Short write: {sent} of {len(data)} bytes")

        logger.debug("Sent %s frame (%d bytes) to %s", frame.command, sent, self.endpoint)
        return self

    def can_read(self) -> bool:
        """Poll briefly for pending input without committing to a blocking read."""
        if self._socket is None:
            return False
        if self._recv_buffer:
            return True
        try:
            readable, _, _ = select.select([self._socket], [], [], self.options.can_read_timeout)
        except (OSError, ValueError) as exc:
            logger.debug("select() failed on %s: %s", self.endpoint, exc)
            return False
        return bool(readable)

    def read(self) -> Optional[StompFrame]:
        """Read one frame; returns None when the stream holds no more data."""
        self.ping()
        response = bytearray()

        # COMMAND and header lines, terminated by a blank line
        while True:
            line = self._read_line()
            if not line:
                break
            if not response and line.strip() == b"":
                # heart-beat between frames
                continue
            response += line
            if line.rstrip() == b"":
                break

        if not response:
            return None

        headers = extract_headers(bytes(response))
        content_length = content_length_of(headers)

        if content_length is None:
            # read until we hit the end of frame marker
            while True:
                line = self._read_line()
                if not line:
                    break
                response += line
                if line.endswith(END_OF_FRAME):
                    break
        else:
            remaining = content_length + len(END_OF_FRAME)
            while remaining > 0:
                chunk = self._read_chunk(remaining)
                if not chunk:
                    break
                response += chunk
                remaining -= len(chunk)

        raw = bytes(response)
        frame = self.create_frame()
        frame.set_command(extract_command(raw))
        frame.set_headers(headers)
        frame.set_body(extract_body(raw, content_length))
        logger.debug("Received %s frame (%d bytes) from %s", frame.command, len(raw), self.endpoint)
        return frame

    def create_frame(self) -> StompFrame:
        """Build an empty frame with the configured factory."""
        try:
            frame = self.options.frame_factory()
        except Exception as exc:
            raise FrameClassError(
                ErrorCode.INVALID_FRAME_CLASS,
                message=f"Frame factory {self.options.frame_factory!r} failed to build a frame: {exc}",
            ) from exc
        if not isinstance(frame, StompFrame):
            raise FrameClassError(
                ErrorCode.INVALID_FRAME_CLASS,
                message=f"Invalid frame factory {self.options.frame_factory!r}; it must build StompFrame objects",
            )
        return frame

    def _read_line(self) -> bytes:
        while True:
            index = self._recv_buffer.find(EOL)
            if index != -1:
                return self._take(index + 1)
            if not self._recv_into_buffer():
                return self._take(len(self._recv_buffer))

    def _read_chunk(self, size: int) -> bytes:
        if not self._recv_buffer and not self._recv_into_buffer():
            return b""
        return self._take(min(size, len(self._recv_buffer)))

    def _take(self, count: int) -> bytes:
        data = bytes(self._recv_buffer[:count])
        del self._recv_buffer[:count]
        return data

    def _recv_into_buffer(self) -> bool:
        """Pull one chunk off the socket; False once the stream has ended."""
        if self._eof:
            return False
        size = RECV_CHUNK_SIZE if self._socket.type == socket.SOCK_STREAM else MAX_DATAGRAM_SIZE
        try:
            chunk = self._socket.recv(size)
        except socket.timeout as exc:
            self._read_timed_out(exc)
        except OSError as exc:
            # Anything but a timeout ends the stream for this read.
            logger.warning("Read from %s failed, treating as end of stream: %s", self.endpoint, exc)
            self._eof = True
            return False
        if not chunk:
            self._eof = True
            return False
        self._recv_buffer.extend(chunk)
        return True

    def _read_timed_out(self, exc: Exception) -> NoReturn:
        timeout = self.options.timeout
        endpoint = self.endpoint
        self.close()
        raise StompConnectionError(
            ErrorCode.READ_TIMEOUT, message=f"Read timed out after {timeout:g} seconds", endpoint=endpoint
        ) from exc


__all__ = ["Connection", "ConnectionOptions"]
