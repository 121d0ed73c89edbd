import pytest

from clusterevent.io.frame import Frame, FrameCodec, FrameConst, FrameHeader, decode_header, encode
from clusterevent.exceptions import EncodingError, TruncatedHeaderError


@pytest.mark.parametrize("length", [0, 1, 255, 256, 70000])
def test_header_round_trip(length):
    frame = encode(b"x" * length)
    assert decode_header(frame.header.to_bytes()) == length
    assert len(frame) == FrameConst.HEADER_SIZE + length


def test_wire_layout_is_network_order():
    frame = encode(b'{"a":1}')
    assert frame.to_bytes() == b"\x00\x00\x00\x07" + b'{"a":1}'


def test_decode_header_ignores_trailing_body():
    assert decode_header(b"\x00\x00\x01\x00" + b"rest of the frame") == 256


@pytest.mark.parametrize("data", [b"", b"\x00", b"\x00\x00\x00"])
def test_decode_header_truncated(data):
    with pytest.raises(TruncatedHeaderError):
        decode_header(data)


def test_header_length_field_limits():
    assert FrameHeader(FrameConst.MAX_BODY_LENGTH).to_bytes() == b"\xff\xff\xff\xff"
    with pytest.raises(EncodingError):
        FrameHeader(FrameConst.MAX_BODY_LENGTH + 1)
    with pytest.raises(EncodingError):
        FrameHeader(-1)


def test_header_str():
    assert str(FrameHeader(5)) == "<length=5>"
    assert FrameHeader.from_bytes(b"\x00\x00\x00\x05") == FrameHeader(5)


def test_frame_rejects_mismatched_body():
    with pytest.raises(EncodingError):
        Frame(header=FrameHeader(3), body=b"ab")


def test_encode_into_writes_persistent_buffer():
    codec = FrameCodec(capacity=64)
    buffer = codec.buffer

    view = codec.encode_into(b"hello")
    assert bytes(view) == b"\x00\x00\x00\x05hello"
    assert codec.length == 9

    codec.reset()
    view = codec.encode_into(b"hi")
    assert bytes(view) == b"\x00\x00\x00\x02hi"
    assert codec.buffer is buffer
    assert len(codec.buffer) == 64


def test_exact_fit():
    codec = FrameCodec(capacity=16)
    view = codec.encode_into(b"x" * 12)
    assert len(view) == 16


def test_oversized_body_leaves_buffer_untouched():
    codec = FrameCodec(capacity=16)
    codec.encode_into(b"abc")
    before = bytes(codec.buffer)

    with pytest.raises(EncodingError):
        codec.encode_into(b"y" * 13)

    assert bytes(codec.buffer) == before
    assert codec.length == 7
    assert bytes(codec.frame()) == b"\x00\x00\x00\x03abc"


def test_standalone_encode_respects_capacity():
    codec = FrameCodec(capacity=16)
    assert codec.encode(b"x" * 12).header.body_length == 12
    with pytest.raises(EncodingError):
        codec.encode(b"x" * 13)


def test_capacity_must_exceed_header():
    with pytest.raises(ValueError):
        FrameCodec(capacity=FrameConst.HEADER_SIZE)


def test_default_capacity():
    codec = FrameCodec()
    assert codec.capacity == 4 * 1024 * 1024
    assert codec.max_body_length == 4 * 1024 * 1024 - 4
