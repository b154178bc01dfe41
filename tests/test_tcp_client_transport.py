import asyncio

import pytest

from barco_projector import (
    ConnectionClosedError,
    NotConnectedError,
    ResponseTimeoutError,
    TcpBarcoProjectorClientTransport,
    TransportError,
)
from barco_projector.emulator import BarcoProjectorEmulator

from helpers import line_responder, silent_responder, wait_for_condition


async def _unused_port() -> int:
    async with BarcoProjectorEmulator("127.0.0.1", 0) as emulator:
        port = emulator.port
    return port


def _pending_futures(transport, n):
    loop = asyncio.get_running_loop()
    futures = [loop.create_future() for _ in range(n)]
    transport._pending.extend(futures)
    return futures


@pytest.mark.asyncio
async def test_responses_resolve_oldest_command_first():
    transport = TcpBarcoProjectorClientTransport("127.0.0.1", 3023)
    first, second = _pending_futures(transport, 2)

    transport._on_data_received(b"one")
    assert first.result() == b"one"
    assert not second.done()

    transport._on_data_received(b"two")
    assert second.result() == b"two"
    assert transport.num_pending == 0


@pytest.mark.asyncio
async def test_unframed_read_event_is_one_response():
    # Without a terminator there are no message boundaries: two responses
    # delivered in one read event both go to the oldest command.
    transport = TcpBarcoProjectorClientTransport("127.0.0.1", 3023)
    first, second = _pending_futures(transport, 2)

    transport._on_data_received(b"onetwo")
    assert first.result() == b"onetwo"
    assert not second.done()


@pytest.mark.asyncio
async def test_terminator_framing_splits_and_buffers():
    transport = TcpBarcoProjectorClientTransport("127.0.0.1", 3023, response_terminator=b"\r\n")
    first, second, third = _pending_futures(transport, 3)

    transport._on_data_received(b"one\r\ntw")
    assert first.result() == b"one"
    assert not second.done()

    transport._on_data_received(b"o\r\nthree\r")
    assert second.result() == b"two"
    assert not third.done()

    transport._on_data_received(b"\n")
    assert third.result() == b"three"


@pytest.mark.asyncio
async def test_abandoned_command_still_consumes_its_response():
    transport = TcpBarcoProjectorClientTransport("127.0.0.1", 3023)
    first, second = _pending_futures(transport, 2)
    first.cancel()

    transport._on_data_received(b"late")
    assert not second.done()
    transport._on_data_received(b"mine")
    assert second.result() == b"mine"


@pytest.mark.asyncio
async def test_unsolicited_data_is_discarded():
    transport = TcpBarcoProjectorClientTransport("127.0.0.1", 3023)
    transport._on_data_received(b"hello")
    (future,) = _pending_futures(transport, 1)
    transport._on_data_received(b"answer")
    assert future.result() == b"answer"


@pytest.mark.asyncio
async def test_transact_before_connect_writes_nothing():
    transport = TcpBarcoProjectorClientTransport("127.0.0.1", 3023)
    with pytest.raises(NotConnectedError):
        await transport.transact(b"X")
    assert transport.num_pending == 0


@pytest.mark.asyncio
async def test_transact_round_trip():
    async with BarcoProjectorEmulator("127.0.0.1", 0, responder=lambda data: b"OK") as emulator:
        transport = await TcpBarcoProjectorClientTransport.create("127.0.0.1", emulator.port)
        async with transport:
            assert await transport.transact(b"X") == b"OK"
        assert emulator.received == [b"X"]
        assert transport.is_shutting_down()


@pytest.mark.asyncio
async def test_response_timeout_shuts_transport_down():
    async with BarcoProjectorEmulator("127.0.0.1", 0, responder=silent_responder) as emulator:
        transport = await TcpBarcoProjectorClientTransport.create(
            "127.0.0.1", emulator.port, timeout_secs=0.05)
        closed = []
        transport.add_close_callback(closed.append)

        with pytest.raises(ResponseTimeoutError):
            await transport.transact(b"X")

        assert transport.is_shutting_down()
        await wait_for_condition(lambda: len(closed) == 1)
        assert isinstance(closed[0], ResponseTimeoutError)
        with pytest.raises(ResponseTimeoutError):
            await transport.wait()


@pytest.mark.asyncio
async def test_peer_close_fails_pending_commands():
    async with BarcoProjectorEmulator("127.0.0.1", 0, responder=silent_responder) as emulator:
        transport = await TcpBarcoProjectorClientTransport.create(
            "127.0.0.1", emulator.port, timeout_secs=None)
        closed = []
        transport.add_close_callback(closed.append)

        pending = asyncio.ensure_future(transport.transact(b"X"))
        await wait_for_condition(lambda: len(emulator.received) == 1)
        emulator.close_sessions()

        with pytest.raises(ConnectionClosedError):
            await pending
        await wait_for_condition(lambda: len(closed) == 1)
        assert closed == [None]
        await transport.wait()


@pytest.mark.asyncio
async def test_close_callback_added_after_close_still_runs():
    async with BarcoProjectorEmulator("127.0.0.1", 0) as emulator:
        transport = await TcpBarcoProjectorClientTransport.create("127.0.0.1", emulator.port)
        await transport.aclose()
        closed = []
        transport.add_close_callback(closed.append)
        await wait_for_condition(lambda: closed == [None])


@pytest.mark.asyncio
async def test_framed_concurrent_commands_over_socket():
    async with BarcoProjectorEmulator("127.0.0.1", 0, responder=line_responder()) as emulator:
        transport = await TcpBarcoProjectorClientTransport.create(
            "127.0.0.1", emulator.port, response_terminator=b"\r")
        async with transport:
            results = await asyncio.gather(
                transport.transact(b"A\r"),
                transport.transact(b"B\r"),
                transport.transact(b"C\r"),
            )
        assert results == [b"R:A", b"R:B", b"R:C"]


@pytest.mark.asyncio
async def test_connect_refused_raises_transport_error():
    port = await _unused_port()
    with pytest.raises(TransportError):
        await TcpBarcoProjectorClientTransport.create("127.0.0.1", port, connect_timeout_secs=2.0)
