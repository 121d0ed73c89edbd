"""
Shared fixtures: a scripted in-memory transport and a loopback TCP listener.
"""

import queue
import socket
import threading

import pytest

from clusterevent.io.transport import ConnectionState


class FakeTransport:
    """
    In-memory stream transport.

    connect_results: booleans returned by successive connect() calls; once
    exhausted, connect() returns default_connect.
    send_results: values (or exceptions) returned by successive send() calls;
    once exhausted, send() accepts up to max_per_send bytes.
    """

    def __init__(self, connect_results=(), default_connect=True, send_results=(), max_per_send=None):
        self.connect_results = list(connect_results)
        self.default_connect = default_connect
        self.send_results = list(send_results)
        self.max_per_send = max_per_send
        self.connect_calls = []
        self.send_calls = []
        self.sent = bytearray()
        self.close_calls = 0
        self.connected = False

    def connect(self, host, port):
        self.connect_calls.append((host, port))
        ok = self.connect_results.pop(0) if self.connect_results else self.default_connect
        self.connected = ok
        return ok

    def send(self, data):
        self.send_calls.append(len(data))
        if self.send_results:
            result = self.send_results.pop(0)
            if isinstance(result, BaseException):
                raise result
            if result > 0:
                self.sent.extend(bytes(data[:result]))
            return result
        n = len(data) if self.max_per_send is None else min(len(data), self.max_per_send)
        self.sent.extend(bytes(data[:n]))
        return n

    def close(self):
        self.close_calls += 1
        self.connected = False

    def connection_state(self):
        return ConnectionState.CONNECTED if self.connected else ConnectionState.DISCONNECTED


class LoopbackListener:
    """TCP listener on 127.0.0.1 with an ephemeral port, accepting in the background"""

    def __init__(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(4)
        self.port = self.sock.getsockname()[1]
        self.connections: queue.Queue = queue.Queue()
        self._accepted = []
        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()

    def _accept_loop(self):
        while True:
            try:
                conn, _ = self.sock.accept()
            except OSError:
                return
            conn.settimeout(5.0)
            self._accepted.append(conn)
            self.connections.put(conn)

    def accept(self, timeout: float = 5.0) -> socket.socket:
        return self.connections.get(timeout=timeout)

    def close(self):
        self.sock.close()
        for conn in self._accepted:
            conn.close()


def recv_exact(sock: socket.socket, n: int) -> bytes:
    buf = bytearray()
    while len(buf) < n:
        chunk = sock.recv(n - len(buf))
        if not chunk:
            raise ConnectionError("socket closed while reading")
        buf.extend(chunk)
    return bytes(buf)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def listener():
    lst = LoopbackListener()
    yield lst
    lst.close()


@pytest.fixture
def closed_port():
    """A port on 127.0.0.1 with nothing listening"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
