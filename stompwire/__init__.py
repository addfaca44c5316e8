"""
stompwire: transport-layer STOMP client.

Opens a socket to a broker, writes frames to the wire and reads them back.
"""

from .client import Client, Connection, ConnectionOptions
from .protocol import Command, Frame, StompFrame

__all__ = ["Client", "Connection", "ConnectionOptions", "Command", "Frame", "StompFrame"]
