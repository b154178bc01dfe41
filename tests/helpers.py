# tests/helpers.py

import asyncio
from typing import Callable, Optional

from barco_projector.internal_types import Responder


async def wait_for_condition(
        condition: Callable[[], bool],
        timeout_s: float = 2.0,
        interval_s: float = 0.005,
      ) -> None:
    """Polls condition until it is true, failing the test after timeout_s."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_s
    while not condition():
        if loop.time() > deadline:
            raise AssertionError(f"Condition not met within {timeout_s} seconds")
        await asyncio.sleep(interval_s)


def line_responder(prefix: bytes = b"R:", terminator: bytes = b"\r") -> Responder:
    """Answers every terminator-delimited command in a chunk with prefix + command + terminator."""
    def respond(data: bytes) -> Optional[bytes]:
        commands = [c for c in data.split(terminator) if c]
        if not commands:
            return None
        return b"".join(prefix + c + terminator for c in commands)
    return respond


def silent_responder(data: bytes) -> Optional[bytes]:
    return None


def count_received(emulator, data: bytes) -> int:
    return sum(chunk.count(data) for chunk in emulator.received)
