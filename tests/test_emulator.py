import asyncio

import pytest

from barco_projector.emulator import BarcoProjectorEmulator, echo_responder

from helpers import wait_for_condition


def test_echo_responder():
    assert echo_responder(b"NOOP") == b"NOOP"


@pytest.mark.asyncio
async def test_emulator_answers_and_records():
    async with BarcoProjectorEmulator("127.0.0.1", 0, responder=lambda data: data.upper()) as emulator:
        assert emulator.port != 0
        reader, writer = await asyncio.open_connection("127.0.0.1", emulator.port)
        writer.write(b"noop")
        await writer.drain()
        assert await reader.read(100) == b"NOOP"
        assert emulator.received == [b"noop"]
        assert emulator.num_connections == 1

        emulator.close_sessions()
        assert await reader.read(100) == b""
        await wait_for_condition(lambda: len(emulator.sessions) == 0)
        writer.close()


@pytest.mark.asyncio
async def test_responder_exception_kills_session():
    def broken(data: bytes):
        raise ValueError("boom")

    async with BarcoProjectorEmulator("127.0.0.1", 0, responder=broken) as emulator:
        reader, writer = await asyncio.open_connection("127.0.0.1", emulator.port)
        writer.write(b"X")
        await writer.drain()
        assert await reader.read(100) == b""
        writer.close()
