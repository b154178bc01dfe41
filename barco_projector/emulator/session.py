# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector emulator session.

One session exists per accepted client connection.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger

if TYPE_CHECKING:
    from .emulator_impl import BarcoProjectorEmulator

class BarcoProjectorEmulatorSession(asyncio.Protocol):
    emulator: BarcoProjectorEmulator
    session_id: int = -1
    transport: Optional[asyncio.Transport] = None

    def __init__(self, emulator: BarcoProjectorEmulator) -> None:
        super().__init__()
        self.emulator = emulator

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        self.session_id = self.emulator.alloc_session_id(self)
        logger.debug(f"{self}: Connection from {transport.get_extra_info('peername')}")

    def data_received(self, data: bytes) -> None:
        logger.debug(f"{self}: Received {len(data)} bytes: {data.hex(' ')}")
        self.emulator.on_data_received(self, data)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"{self}: Connection lost: {exc}")
        self.transport = None
        self.emulator.free_session_id(self.session_id)

    def write(self, data: bytes) -> None:
        if self.transport is None:
            logger.debug(f"{self}: Dropping write on closed session: {data.hex(' ')}")
            return
        logger.debug(f"{self}: Writing {len(data)} bytes: {data.hex(' ')}")
        self.transport.write(data)

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()

    def __str__(self) -> str:
        return f"BarcoProjectorEmulatorSession({self.session_id})"

    def __repr__(self) -> str:
        return str(self)
