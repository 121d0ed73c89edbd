"""
Cluster event wire framing.

This module implements the length-prefixed frame used on the event stream.

Frame layout on the wire:
  [4 bytes body length (uint32, network byte order)] [body bytes]

The body is UTF-8 JSON by convention. There is no magic number, version
field or checksum, and no padding between header and body.

Example usage:
    codec = FrameCodec(capacity=FrameConst.DEFAULT_BUFFER_SIZE)
    view = codec.encode_into(b'{"type":"custom","name":"fade_in"}')
    sock.sendall(view)

    length = decode_header(view[:FrameConst.HEADER_SIZE])
"""

import struct
from dataclasses import dataclass
from typing import Self

from ..exceptions import EncodingError, TruncatedHeaderError

# Constants
class FrameConst:
    """Constants for frame encoding"""
    HEADER_FORMAT = "!I"
    HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
    MAX_BODY_LENGTH = 0xFFFFFFFF
    DEFAULT_BUFFER_SIZE = 4 * 1024 * 1024 # bytes


@dataclass(frozen=True)
class FrameHeader:
    """Fixed-size header preceding every frame body"""
    body_length: int

    def __post_init__(self):
        if not 0 <= self.body_length <= FrameConst.MAX_BODY_LENGTH:
            raise EncodingError(f"Body length {self.body_length} doesn't fit the header length field (max {FrameConst.MAX_BODY_LENGTH})")

    def to_bytes(self) -> bytes:
        """Convert header to wire format"""
        return struct.pack(FrameConst.HEADER_FORMAT, self.body_length)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> Self:
        return cls(decode_header(data))

    def __str__(self) -> str:
        return f"<length={self.body_length}>"


@dataclass(frozen=True)
class Frame:
    """A header and the body it describes"""
    header: FrameHeader
    body: bytes

    def __post_init__(self):
        if self.header.body_length != len(self.body):
            raise EncodingError(f"Header declares {self.header.body_length} bytes but body has {len(self.body)}")

    def __len__(self) -> int:
        return FrameConst.HEADER_SIZE + self.header.body_length

    def to_bytes(self) -> bytes:
        """Convert frame to wire format"""
        return self.header.to_bytes() + self.body


def encode(body: bytes | bytearray | memoryview) -> Frame:
    """Build a frame for body, limited only by the header length field."""
    body = bytes(body)
    return Frame(header=FrameHeader(len(body)), body=body)


def decode_header(data: bytes | bytearray | memoryview) -> int:
    """Return the body length declared by the header at the start of data."""
    if len(data) < FrameConst.HEADER_SIZE:
        raise TruncatedHeaderError(f"Header needs {FrameConst.HEADER_SIZE} bytes, got {len(data)}")
    (body_length,) = struct.unpack_from(FrameConst.HEADER_FORMAT, data, 0)
    return body_length


class FrameCodec:
    """
    Frames bodies into a persistent, preallocated buffer.

    The buffer is allocated once and reused by every encode_into() call, so
    a session pays for the allocation only once. Frames larger than the
    buffer are rejected before the buffer is touched.

    Not thread-safe: the returned view aliases the buffer and is overwritten
    by the next encode.
    """

    def __init__(self, capacity: int = FrameConst.DEFAULT_BUFFER_SIZE):
        if capacity <= FrameConst.HEADER_SIZE:
            raise ValueError(f"Buffer capacity must be larger than the {FrameConst.HEADER_SIZE} byte header, got {capacity}")
        self.capacity = capacity
        self.buffer = bytearray(capacity)
        self.length = 0 # bytes used by the last encoded frame

    @property
    def max_body_length(self) -> int:
        return min(FrameConst.MAX_BODY_LENGTH, self.capacity - FrameConst.HEADER_SIZE)

    def reset(self) -> None:
        """Mark the buffer empty without reallocating it"""
        self.length = 0

    def _check(self, body_length: int) -> None:
        if body_length > FrameConst.MAX_BODY_LENGTH:
            raise EncodingError(f"Body length {body_length} doesn't fit the header length field (max {FrameConst.MAX_BODY_LENGTH})")
        if body_length > self.max_body_length:
            raise EncodingError(f"Frame of {FrameConst.HEADER_SIZE + body_length} bytes exceeds buffer capacity of {self.capacity} bytes")

    def encode(self, body: bytes | bytearray | memoryview) -> Frame:
        """Build a standalone frame, enforcing the buffer capacity"""
        self._check(len(body))
        return encode(body)

    def encode_into(self, body: bytes | bytearray | memoryview) -> memoryview:
        """Write header and body into the persistent buffer and return a view of the frame"""
        body_length = len(body)
        self._check(body_length)
        end = FrameConst.HEADER_SIZE + body_length
        struct.pack_into(FrameConst.HEADER_FORMAT, self.buffer, 0, body_length)
        self.buffer[FrameConst.HEADER_SIZE:end] = body
        self.length = end
        return memoryview(self.buffer)[:end]

    def frame(self) -> memoryview:
        """View of the last encoded frame"""
        return memoryview(self.buffer)[:self.length]
