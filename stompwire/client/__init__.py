"""Blocking STOMP client: configuration, connection and facade."""

from .config import CLIENT_CONFIG, ConfigError, load_config
from .core import Client, Connection, ConnectionOptions

__all__ = ["CLIENT_CONFIG", "ConfigError", "load_config", "Client", "Connection", "ConnectionOptions"]
