import asyncio
import logging
import threading
import time
from typing import Any, Callable, Optional, Self
from colorama import Fore, Style

from ..io import ConnectionManager, FrameCodec, FrameConst, FrameHeader, StreamTransport, write_all
from ..exceptions import ClusterConnectionError, ClusterSendError, ClusterFrameError, SerializationError
from ..config import SenderConfig
from ..utils import hex_bytes
from .models import to_json_value, serialize

"""
===================================================================================
This module delivers cluster events over a length-prefixed JSON stream.
===================================================================================
"""

class EventSenderSession:
    """
    Owns one connection and one persistent frame buffer, and delivers one
    event per send call: connect if needed, serialize, frame, write.

    Every failure is logged and reported as a False return. A frame that was
    only partly written leaves the stream out of sync, so the connection is
    dropped and the next send reconnects.

    Sends on one session run one at a time; the buffer is never shared
    between two sends.
    """

    def __init__(self,
                 name: str = "Sender",
                 buffer_size: int = FrameConst.DEFAULT_BUFFER_SIZE,
                 transport: Optional[StreamTransport] = None,
                 logger: Optional[logging.Logger] = None,
                 print_traffic: bool = False,
                 sleep: Callable[[float], None] = time.sleep):
        self.name = name
        self.buffer_size = buffer_size
        self.logger = logger or logging.getLogger(__name__)
        self.print_traffic = print_traffic
        self._transport = transport
        self._sleep = sleep
        self._lock = threading.Lock()

        # Created by open()
        self.connection: Optional[ConnectionManager] = None
        self.codec: Optional[FrameCodec] = None

    @classmethod
    def from_config(cls, config: SenderConfig, **kwargs) -> Self:
        return cls(name=config.name, buffer_size=config.buffer_size, **kwargs)

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self) -> Self:
        """Create the connection manager and allocate the persistent buffer"""
        if self.connection is None:
            self.connection = ConnectionManager(self.name, transport=self._transport, logger=self.logger, sleep=self._sleep)
        if self.codec is None:
            self.codec = FrameCodec(self.buffer_size)
        return self

    def close(self) -> None:
        """Drop the connection; the buffer is kept for a later reopen"""
        with self._lock:
            if self.connection is not None:
                self.connection.disconnect()

    def is_open(self) -> bool:
        return self.connection is not None and self.connection.is_open()

    # ============================
    # SENDING
    # ============================

    def send_event_to(self,
                      address: str,
                      port: int,
                      event: Any,
                      *,
                      max_attempts: int = 1,
                      retry_delay_ms: float = 0.0) -> bool:
        """Connect to address:port if not already connected, then send event as one frame"""
        with self._lock:
            self.open()
            try:
                self.connection.connect(address, port, max_attempts=max_attempts, retry_delay_ms=retry_delay_ms)
            except ClusterConnectionError as e:
                self.logger.error(f"{self.name} - {e}")
                return False

            try:
                json_value = to_json_value(event)
            except SerializationError as e:
                self.logger.error(f"Couldn't convert json cluster event data to net packet: {e}")
                return False

            if not self._send_packet(json_value):
                self.logger.error("Couldn't send json cluster event")
                return False
            return True

    def send_packet(self, json_value: dict[str, Any]) -> bool:
        """Send a JSON object over the already open connection"""
        with self._lock:
            self.open()
            return self._send_packet(json_value)

    def _send_packet(self, json_value: dict[str, Any]) -> bool:
        if not self.connection.is_open():
            self.logger.error(f"{self.name} not connected")
            return False

        self.logger.debug(f"{self.name} - sending json...")

        # Reuse the persistent buffer
        self.codec.reset()

        try:
            body = serialize(json_value)
        except SerializationError as e:
            self.logger.warning(f"{self.name} - {e}")
            return False

        try:
            frame = self.codec.encode_into(body)
        except ClusterFrameError as e:
            self.logger.warning(f"{self.name} - Couldn't frame json: {e}")
            return False
        self.logger.debug(f"{self.name} - Outgoing packet header: {FrameHeader.from_bytes(frame)}")

        try:
            write_all(self.connection.transport, frame, len(frame),
                      chunk_name="send-json", description=self.name, logger=self.logger)
        except ClusterSendError as e:
            self.logger.warning(f"{self.name} - Couldn't send json: {e}")
            self.connection.disconnect()
            return False

        if self.print_traffic:
            peer = f"{self.connection.address[0]}:{self.connection.address[1]}" if self.connection.address else "?"
            print(Fore.MAGENTA + f"SEND TO: {peer}  "
                + Fore.WHITE + Style.DIM + f"HEADER: {hex_bytes(frame[:FrameConst.HEADER_SIZE])}"
                + Style.BRIGHT + Fore.CYAN + f"  BODY: {body.decode('utf-8')}"
                + Style.RESET_ALL)

        self.logger.debug(f"{self.name} - Json sent")
        return True

    async def send_event_to_async(self,
                                  address: str,
                                  port: int,
                                  event: Any,
                                  *,
                                  timeout: Optional[float] = None,
                                  max_attempts: int = 1,
                                  retry_delay_ms: float = 0.0) -> bool:
        """
        Run send_event_to on a worker thread, giving up after timeout seconds.

        A timed out send keeps running on its thread until the socket call
        returns; the next send on this session waits for it.
        """
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.send_event_to, address, port, event,
                                  max_attempts=max_attempts, retry_delay_ms=retry_delay_ms),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            self.logger.error(f"{self.name} - send to {address}:{port} timed out after {timeout}s")
            return False
