from __future__ import annotations

import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

from stompwire.protocol.constants import (
    CAN_READ_TIMEOUT,
    DEFAULT_PORT,
    READ_TIMEOUT_DEFAULT_SEC,
    READ_TIMEOUT_DEFAULT_USEC,
)

DEFAULT_CONFIG: Dict[str, Any] = {
    "scheme": "tcp",
    "host": "127.0.0.1",
    "port": DEFAULT_PORT,
    "timeout_sec": READ_TIMEOUT_DEFAULT_SEC,
    "timeout_usec": READ_TIMEOUT_DEFAULT_USEC,
    "can_read_timeout": CAN_READ_TIMEOUT,
    "validate_frames": True,
    "log_level": "INFO",
}

CLIENT_CONFIG: Dict[str, Any] = DEFAULT_CONFIG.copy()

SUPPORTED_SCHEMES = ("tcp", "udp")


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


def load_config(env_path: str = ".env") -> Dict[str, Any]:
    """Load client configuration from env file/environment variables (STOMP_<KEY>)."""
    if os.path.exists(env_path):
        load_dotenv(env_path)

    for key, default_value in DEFAULT_CONFIG.items():
        env_key = f"STOMP_{key.upper()}"
        value = os.getenv(env_key, default_value)
        CLIENT_CONFIG[key] = _coerce_type(value, type(default_value))

    _validate_config()
    logging.getLogger().setLevel(CLIENT_CONFIG["log_level"])
    return CLIENT_CONFIG


def _coerce_type(value: Any, target_type: type) -> Any:
    if isinstance(value, target_type):
        return value
    try:
        if target_type is bool:
            return str(value).lower() in ("1", "true", "yes", "on")
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {value} to {target_type}") from exc


def _validate_config() -> None:
    if CLIENT_CONFIG["scheme"] not in SUPPORTED_SCHEMES:
        raise ConfigError(f"scheme must be one of {', '.join(SUPPORTED_SCHEMES)}")
    if not (1 <= int(CLIENT_CONFIG["port"]) <= 65535):
        raise ConfigError("port must be between 1 and 65535")
    if CLIENT_CONFIG["timeout_sec"] < 0:
        raise ConfigError("timeout_sec must not be negative")
    if not (0 <= CLIENT_CONFIG["timeout_usec"] < 1_000_000):
        raise ConfigError("timeout_usec must be between 0 and 999999")
    if CLIENT_CONFIG["timeout_sec"] == 0 and CLIENT_CONFIG["timeout_usec"] == 0:
        raise ConfigError("read timeout must be positive")
    if CLIENT_CONFIG["can_read_timeout"] < 0:
        raise ConfigError("can_read_timeout must not be negative")


def get(key: str, default: Any = None) -> Any:
    return CLIENT_CONFIG.get(key, default)


__all__ = ["CLIENT_CONFIG", "DEFAULT_CONFIG", "SUPPORTED_SCHEMES", "ConfigError", "get", "load_config"]
