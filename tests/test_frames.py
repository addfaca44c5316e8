import pytest

from stompwire.protocol import Command, Frame, FrameDecodeError, ProtocolError, StompFrame


def test_fluent_setters():
    frame = Frame().set_command(Command.SEND).set_header("destination", "/q").set_body("hi")
    assert frame.command == "SEND"
    assert frame.headers == {"destination": "/q"}
    assert frame.body == b"hi"


def test_header_values_are_strings():
    frame = Frame(command="SEND", headers={"content-length": 3}, body=b"abc")
    assert frame.headers["content-length"] == "3"
    assert frame.content_length == 3


def test_to_frame_requires_command():
    with pytest.raises(ProtocolError):
        Frame(body=b"x").to_frame()


def test_auto_content_length():
    frame = Frame(command="SEND", headers={"destination": "/q"}, body=b"\x00\x01", auto_content_length=True)
    assert frame.to_frame() == b"SEND\ndestination:/q\ncontent-length:2\n\n\x00\x01\x00"
    assert "content-length" not in frame.headers


def test_from_frame():
    frame = Frame.from_frame(b"RECEIPT\nreceipt-id:77\n\n\x00\n")
    assert frame.command == "RECEIPT"
    assert frame.get_header("receipt-id") == "77"
    assert frame.body == b""


def test_from_frame_rejects_garbage():
    with pytest.raises(FrameDecodeError):
        Frame.from_frame(b"\n\n\x00")


def test_frame_satisfies_capability():
    assert isinstance(Frame(), StompFrame)
    assert not isinstance(object(), StompFrame)
