# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector emulator.

Provides a simple emulation of a Barco projector control port on TCP/IP.
Every chunk of bytes received from a client is handed to a responder, whose
return value (if not None) is written back to that client. The emulator does
not interpret commands.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..constants import DEFAULT_PORT

from .session import BarcoProjectorEmulatorSession

def echo_responder(data: bytes) -> Optional[bytes]:
    """Default responder; answers every command with the command itself."""
    return data

class BarcoProjectorEmulator(AsyncContextManager['BarcoProjectorEmulator']):
    bind_addr: str
    port: int
    responder: Responder
    sessions: Dict[int, BarcoProjectorEmulatorSession]
    next_session_id: int = 0
    num_connections: int = 0
    """Total number of client connections accepted since start."""
    received: List[bytes]
    """Every chunk of bytes received, from all sessions, in order."""
    server: Optional[asyncio.Server] = None
    final_result: asyncio.Future[None]

    def __init__(
            self,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            responder: Optional[Responder] = None,
          ):
        self.bind_addr = '0.0.0.0' if bind_addr is None else bind_addr
        self.port = port
        self.responder = echo_responder if responder is None else responder
        self.sessions = {}
        self.received = []
        self.final_result = asyncio.get_running_loop().create_future()

    def alloc_session_id(self, session: BarcoProjectorEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.num_connections += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_data_received(self, session: BarcoProjectorEmulatorSession, data: bytes) -> None:
        """Called when bytes are received from a session."""
        self.received.append(data)
        try:
            response = self.responder(data)
        except Exception as e:
            logger.exception(f"{session}: Exception in responder; killing session: {e}")
            session.close()
            return
        if response is None:
            logger.debug(f"{session}: No response")
        else:
            session.write(response)

    def close_sessions(self) -> None:
        """Closes every open client connection, as a projector dropping its clients would."""
        for session in list(self.sessions.values()):
            session.close()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            self.server = await loop.create_server(
                lambda: BarcoProjectorEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            if self.port == 0:
                self.port = self.server.sockets[0].getsockname()[1]
            logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.port}")
            await self.server.start_serving()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException:
                logger.debug("Emulator: Exception while cleaning up failed start", exc_info=True)
            raise

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.wait_closed()

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown.
           Raises the final exception, if any."""
        try:
            await self.final_result
        finally:
            if self.server is not None:
                try:
                    self.server.close()
                    self.close_sessions()
                finally:
                    await self.server.wait_closed()
                    self.server = None

    async def close_and_wait(self, exc: Optional[BaseException]=None) -> None:
        self.close(exc)
        await self.wait_closed()

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)
            if self.server is not None:
                self.server.close()

    async def __aenter__(self) -> BarcoProjectorEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result(exc)
        try:
            # ensure that final_result has been awaited
            await self.wait_closed()
        except Exception as e:
            logger.debug(f"Emulator: Closed with exception: {e}")

    def __str__(self) -> str:
        return f"BarcoProjectorEmulator({self.bind_addr}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
