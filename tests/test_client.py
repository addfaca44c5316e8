import pytest

from stompwire.client.config import DEFAULT_CONFIG
from stompwire.client.core import Client, Connection
from stompwire.protocol import ErrorCode, Frame, FrameValidationError, StompConnectionError


def _config(**overrides):
    config = DEFAULT_CONFIG.copy()
    config.update(overrides)
    return config


def test_add_connection_success(broker):
    client = Client(config=_config(timeout_sec=2))
    assert client.add_connection("tcp", broker.host, broker.port) is True
    assert client.connected
    assert client.connection.options.timeout == 2
    client.close(graceful=False)


def test_add_connection_failure_returns_false(closed_port):
    client = Client(config=_config())
    assert client.add_connection("tcp", "127.0.0.1", closed_port) is False
    assert not client.connected
    with pytest.raises(StompConnectionError) as excinfo:
        client.receive()
    assert excinfo.value.code == ErrorCode.NOT_CONNECTED


def test_constructor_connects_and_installs_frame_factory(broker):
    class CustomFrame(Frame):
        pass

    client = Client("tcp", broker.host, broker.port, frame_factory=CustomFrame, config=_config())
    try:
        assert isinstance(client.create_frame(), CustomFrame)
    finally:
        client.close(graceful=False)


def test_send_and_receive(broker):
    client = Client("tcp", broker.host, broker.port, config=_config(timeout_sec=2))
    peer = broker.accept()
    frame = client.create_frame().set_command("SEND").set_header("destination", "/q").set_body(b"hi")
    client.send(frame)
    assert peer.recv(4096) == b"SEND\ndestination:/q\n\nhi\x00"

    peer.sendall(b"MESSAGE\ndestination:/q\nmessage-id:1\nsubscription:0\n\nyo\x00\n")
    assert client.can_read()
    received = client.receive()
    assert received.body == b"yo"

    peer.close()
    assert client.receive() is None
    client.close(graceful=False)


def test_send_validates_frames(broker):
    client = Client("tcp", broker.host, broker.port, config=_config())
    try:
        with pytest.raises(FrameValidationError):
            client.send(Frame(command="SEND", body=b"no destination"))
    finally:
        client.close(graceful=False)


def test_send_without_validation(broker):
    client = Client("tcp", broker.host, broker.port, config=_config(validate_frames=False))
    peer = broker.accept()
    client.send(Frame(command="SEND", body=b"raw"))
    assert peer.recv(4096) == b"SEND\n\nraw\x00"
    client.close(graceful=False)


def test_second_connection_replaces_first(broker):
    client = Client("tcp", broker.host, broker.port, config=_config(timeout_sec=2))
    first_peer = broker.accept()
    first = client.connection

    assert client.add_connection("tcp", broker.host, broker.port)
    broker.accept()
    assert client.connection is not first
    assert not first.is_open
    assert broker.drain(first_peer) == b"DISCONNECT\n\n\x00"
    client.close(graceful=False)


def test_close_is_graceful_by_default(broker):
    client = Client("tcp", broker.host, broker.port, config=_config())
    peer = broker.accept()
    client.close()
    assert broker.drain(peer) == b"DISCONNECT\n\n\x00"
    assert not client.connected
    client.close()


def test_custom_connection_class(broker):
    class TracingConnection(Connection):
        opened = []

        def open(self, scheme, host, port, options=None):
            self.opened.append((scheme, host, port))
            return super().open(scheme, host, port, options)

    client = Client(connection_class=TracingConnection, config=_config())
    assert client.add_connection("tcp", broker.host, broker.port)
    assert TracingConnection.opened == [("tcp", broker.host, broker.port)]
    client.close(graceful=False)


def test_add_connection_bad_host_returns_false():
    client = Client(config=_config(timeout_sec=1))
    assert client.add_connection("tcp", "a..b", 61613) is False
    assert not client.connected


def test_send_rejects_server_frames(broker):
    client = Client("tcp", broker.host, broker.port, config=_config())
    try:
        frame = Frame(command="MESSAGE", headers={"destination": "/q", "message-id": "1", "subscription": "0"})
        with pytest.raises(FrameValidationError):
            client.send(frame)
    finally:
        client.close(graceful=False)


def test_from_config_connects_to_configured_endpoint(broker):
    client = Client.from_config(_config(host=broker.host, port=broker.port, timeout_sec=2))
    try:
        assert client.connected
        assert client.connection.endpoint == f"tcp://{broker.host}:{broker.port}"
    finally:
        client.close(graceful=False)
