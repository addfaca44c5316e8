"""Wire-level constants of the STOMP text protocol."""

ENCODING = "utf-8"
EOL = b"\n"
NULL = b"\x00"
END_OF_FRAME = NULL + EOL
HEADER_SEPARATOR = ":"
CONTENT_LENGTH = "content-length"

DEFAULT_PORT = 61613
READ_TIMEOUT_DEFAULT_SEC = 5
READ_TIMEOUT_DEFAULT_USEC = 0
CAN_READ_TIMEOUT = 0.1  # seconds
RECV_CHUNK_SIZE = 4096

__all__ = [
    "ENCODING",
    "EOL",
    "NULL",
    "END_OF_FRAME",
    "HEADER_SEPARATOR",
    "CONTENT_LENGTH",
    "DEFAULT_PORT",
    "READ_TIMEOUT_DEFAULT_SEC",
    "READ_TIMEOUT_DEFAULT_USEC",
    "CAN_READ_TIMEOUT",
    "RECV_CHUNK_SIZE",
]
