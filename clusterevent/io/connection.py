"""
Outbound connection manager.

Owns a single stream transport and moves it between three states:

  DISCONNECTED --connect()--> CONNECTING --success--> CONNECTED
  CONNECTING --attempt limit reached--> DISCONNECTED (raises)
  CONNECTED --disconnect()--> DISCONNECTED

Whether the connection is open is always read back from the transport,
never from a locally cached flag.

Example usage:
    with ConnectionManager(name="Sender") as conn:
        conn.connect("127.0.0.1", 41003, max_attempts=3, retry_delay_ms=500)
        write_all(conn.transport, b"...")
"""

import ipaddress
import logging
import time
from typing import Callable, Optional, Tuple

from .transport import ConnectionState, SocketTransport, StreamTransport
from ..exceptions import AddressParseError, ConnectionRetryExhaustedError


class ConnectionManager:

    def __init__(self,
                 name: str = "Sender",
                 transport: Optional[StreamTransport] = None,
                 logger: Optional[logging.Logger] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.name = name
        self.logger = logger or logging.getLogger(__name__)
        self.transport: StreamTransport = transport if transport is not None else SocketTransport(name, logger=self.logger)
        self.address: Optional[Tuple[str, int]] = None
        self._sleep = sleep
        self._connecting = False

    @staticmethod
    def parse_address(address: str, port: int) -> Tuple[str, int]:
        """Validate a dotted-decimal IPv4 address and a port number"""
        if not isinstance(address, str):
            raise AddressParseError(f"Address must be a dotted-decimal string, got {address!r}")
        try:
            ip = ipaddress.IPv4Address(address.strip())
        except ValueError as e:
            raise AddressParseError(f"Couldn't parse the address: {address}") from e
        if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
            raise AddressParseError(f"Invalid port number: {port!r}")
        return str(ip), port

    @property
    def state(self) -> ConnectionState:
        if self._connecting:
            return ConnectionState.CONNECTING
        return ConnectionState.CONNECTED if self.is_open() else ConnectionState.DISCONNECTED

    def is_open(self) -> bool:
        return self.transport.connection_state() == ConnectionState.CONNECTED

    def connect(self, address: str, port: int, max_attempts: int = 0, retry_delay_ms: float = 0.0) -> bool:
        """
        Open the connection, retrying failed attempts.

        Returns immediately when already connected to the same listener.
        max_attempts of 0 retries forever. Returns whether the transport
        reports the connection open once connect succeeded.

        Raises:
            AddressParseError: address or port is malformed, nothing attempted
            ConnectionRetryExhaustedError: max_attempts reached without success
        """
        host, port = self.parse_address(address, port)
        if max_attempts < 0:
            raise ValueError(f"max_attempts must be 0 (unlimited) or more, got {max_attempts}")
        if retry_delay_ms < 0:
            raise ValueError(f"retry_delay_ms must not be negative, got {retry_delay_ms}")

        if self.is_open():
            if self.address == (host, port):
                self.logger.debug(f"{self.name} already connected to {host}:{port}")
                return True
            self.logger.info(f"{self.name} switching to {host}:{port}")
            self.disconnect()

        self._connecting = True
        attempt = 0
        try:
            while not self.transport.connect(host, port):
                self.logger.info(f"{self.name} couldn't connect to the server {host}:{port} [{attempt}]")
                attempt += 1
                if max_attempts > 0 and attempt >= max_attempts:
                    self.logger.error(f"{self.name} connection attempts limit reached")
                    raise ConnectionRetryExhaustedError(f"{self.name} couldn't connect to {host}:{port} after {attempt} attempt(s)")
                # Sleep some time before next try
                self._sleep(retry_delay_ms / 1000.0)
        finally:
            self._connecting = False

        self.address = (host, port)
        if not self.is_open():
            self.logger.warning(f"{self.name} connected to {host}:{port} but the socket doesn't report connected")
            return False
        self.logger.info(f"{self.name} connected to {host}:{port}")
        return True

    def disconnect(self) -> None:
        self.logger.info(f"{self.name} disconnecting...")
        # Also releases a socket whose peer already closed
        self.transport.close()
        self.address = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
