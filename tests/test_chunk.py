import math

import pytest

from clusterevent.io.chunk import write_all
from clusterevent.exceptions import TransportError, ZeroProgressError, ProtocolViolationError

from conftest import FakeTransport


@pytest.mark.parametrize("n,k", [(10, 3), (10, 10), (1, 1), (1000, 7)])
def test_partial_writes_deliver_everything(n, k):
    transport = FakeTransport(max_per_send=k)
    data = bytes(range(256)) * (n // 256 + 1)

    assert write_all(transport, data, n) == n
    assert bytes(transport.sent) == data[:n]
    assert len(transport.send_calls) == math.ceil(n / k)


def test_each_attempt_offers_the_unsent_suffix():
    transport = FakeTransport(max_per_send=3)
    write_all(transport, b"0123456789")
    assert transport.send_calls == [10, 7, 4, 1]


def test_zero_length_sends_nothing():
    transport = FakeTransport()
    assert write_all(transport, b"abc", 0) == 0
    assert transport.send_calls == []


def test_total_length_limits_what_is_sent():
    transport = FakeTransport()
    write_all(transport, bytearray(b"framegarbage"), 5)
    assert bytes(transport.sent) == b"frame"


def test_total_length_beyond_data():
    with pytest.raises(ValueError):
        write_all(FakeTransport(), b"abc", 4)


@pytest.mark.parametrize("result", [0, -1])
def test_no_progress_fails_immediately(result):
    transport = FakeTransport(send_results=[result] * 100)
    with pytest.raises(ZeroProgressError):
        write_all(transport, b"abcdef")
    assert len(transport.send_calls) == 1


def test_no_progress_after_partial_write():
    transport = FakeTransport(send_results=[2, 0])
    with pytest.raises(ZeroProgressError):
        write_all(transport, b"abcdef")
    assert transport.send_calls == [6, 4]


def test_over_reported_write():
    transport = FakeTransport(send_results=[4, 5])
    with pytest.raises(ProtocolViolationError):
        write_all(transport, b"abcdef")


def test_send_failure_is_transport_error():
    transport = FakeTransport(send_results=[ConnectionResetError("reset by peer")])
    with pytest.raises(TransportError) as exc_info:
        write_all(transport, b"abcdef", chunk_name="send-json")
    assert isinstance(exc_info.value.__cause__, ConnectionResetError)
    assert "send-json" in str(exc_info.value)


def test_failure_is_logged(caplog):
    transport = FakeTransport(send_results=[0])
    with pytest.raises(ZeroProgressError):
        write_all(transport, b"abcdef", chunk_name="send-json", description="Sender")
    assert "Sender - send-json send failed: 0 of 6 left" in caplog.text
