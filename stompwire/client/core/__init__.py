from .client import Client
from .connection import Connection, ConnectionOptions

__all__ = ["Client", "Connection", "ConnectionOptions"]
