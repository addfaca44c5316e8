from __future__ import annotations

import socket

import pytest

from stompwire.client.core import Connection


class Broker:
    """Loopback listener standing in for a STOMP broker."""

    def __init__(self) -> None:
        self.server = socket.create_server(("127.0.0.1", 0))
        self.host, self.port = self.server.getsockname()[:2]
        self.peers: list[socket.socket] = []

    def accept(self) -> socket.socket:
        self.server.settimeout(2)
        peer, _ = self.server.accept()
        peer.settimeout(2)
        self.peers.append(peer)
        return peer

    @staticmethod
    def drain(peer: socket.socket) -> bytes:
        """Read from peer until it closes its side."""
        data = b""
        while True:
            chunk = peer.recv(4096)
            if not chunk:
                return data
            data += chunk

    def close(self) -> None:
        for peer in self.peers:
            peer.close()
        self.server.close()


@pytest.fixture
def broker():
    b = Broker()
    yield b
    b.close()


@pytest.fixture
def connected(broker):
    """An open Connection plus the broker side of its socket."""
    conn = Connection({"timeout_sec": 2})
    conn.open("tcp", broker.host, broker.port)
    peer = broker.accept()
    yield conn, peer
    conn.close(graceful=False)


@pytest.fixture
def closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
