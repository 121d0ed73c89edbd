"""
Chunk sender.

Pushes an exact byte count through a stream transport, looping over
partial writes. There is no delay between attempts; the transport is
trusted to block or to return however many bytes it could take.
"""

import logging
from typing import Optional

from .transport import StreamTransport
from ..exceptions import TransportError, ZeroProgressError, ProtocolViolationError


def write_all(transport: StreamTransport,
              data: bytes | bytearray | memoryview,
              total_length: Optional[int] = None,
              chunk_name: str = "WriteDataChunk",
              description: str = "Sender",
              logger: Optional[logging.Logger] = None) -> int:
    """
    Send the first total_length bytes of data, returning the number sent.

    Raises:
        TransportError: the send call itself failed
        ZeroProgressError: a send reported zero or negative bytes written
        ProtocolViolationError: a send reported more bytes than were left
    """
    logger = logger or logging.getLogger(__name__)
    view = memoryview(data).cast("B")
    if total_length is None:
        total_length = len(view)
    if not 0 <= total_length <= len(view):
        raise ValueError(f"{chunk_name} length {total_length} is outside the {len(view)} byte buffer")

    sent_total = 0
    while sent_total < total_length:
        left = total_length - sent_total

        try:
            sent_now = transport.send(view[sent_total:total_length])
        except OSError as e:
            logger.error(f"{description} - {chunk_name} send failed (length={total_length}): {e}")
            raise TransportError(f"{chunk_name} send failed after {sent_total} of {total_length} bytes: {e}") from e

        if sent_now is None or sent_now <= 0:
            logger.error(f"{description} - {chunk_name} send failed: {sent_now} of {left} left")
            raise ZeroProgressError(f"{chunk_name} made no progress with {left} of {total_length} bytes left")
        if sent_now > left:
            logger.error(f"{description} - {chunk_name} send failed: {sent_now} of {left} left")
            raise ProtocolViolationError(f"{chunk_name} transport reported {sent_now} bytes written with only {left} left")

        sent_total += sent_now
        logger.debug(f"{description} - {chunk_name} sent {sent_now} bytes, {total_length - sent_total} bytes left")

    logger.debug(f"{description} - {chunk_name} was sent")
    return sent_total
