# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector TCP/IP client transport.

Provides an implementation of BarcoProjectorClientTransport over a TCP/IP
socket.

The wire protocol is a raw byte stream with no defined message boundaries.
Unless a response terminator is configured, every read event from the socket
is treated as one complete response. Responses are handed to outstanding
commands in the order the commands were written.
"""

from __future__ import annotations

import asyncio
from asyncio import Future
from collections import deque

from ..internal_types import *
from ..exceptions import (
    NotConnectedError,
    TransportError,
    ResponseTimeoutError,
    ConnectionClosedError,
  )
from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_PORT,
    CONNECT_TIMEOUT,
    READ_CHUNK_SIZE,
  )
from ..pkg_logging import logger

from .client_transport import BarcoProjectorClientTransport

class TcpBarcoProjectorClientTransport(BarcoProjectorClientTransport):
    """Barco Projector TCP/IP client transport."""

    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    host: str
    port: int
    timeout_secs: Optional[float]
    connect_timeout_secs: float
    response_terminator: Optional[bytes]
    final_status: Future[None]
    reader_task: Optional[asyncio.Task[None]] = None
    reader_closed: bool = False
    writer_closed: bool = False

    _pending: Deque[Future[bytes]]
    """Futures for commands that have been written but not yet answered, oldest first."""

    _read_buffer: bytearray
    """Partial response bytes, used only when a response terminator is configured."""

    _close_callbacks: List[CloseCallback]
    _close_notified: bool = False
    _close_exc: Optional[BaseException] = None

    def __init__(
            self,
            host: str,
            port: int=DEFAULT_PORT,
            timeout_secs: Optional[float]=DEFAULT_TIMEOUT,
            connect_timeout_secs: float=CONNECT_TIMEOUT,
            response_terminator: Optional[bytes]=None,
          ) -> None:
        """Initializes the transport.
        """
        super().__init__()
        self.host = host
        self.port = port
        self.timeout_secs = timeout_secs
        self.connect_timeout_secs = connect_timeout_secs
        self.response_terminator = response_terminator if response_terminator else None
        self._pending = deque()
        self._read_buffer = bytearray()
        self._close_callbacks = []
        self.final_status = asyncio.get_running_loop().create_future()
        self.final_status.add_done_callback(self._on_final_status)

    @property
    def num_pending(self) -> int:
        """The number of commands still waiting for a response."""
        return len(self._pending)

    # @abstractmethod
    def is_shutting_down(self) -> bool:
        """Returns True if the transport is shutting down or closed."""
        return self.final_status.done()

    # @abstractmethod
    def add_close_callback(self, callback: CloseCallback) -> None:
        if self._close_notified:
            asyncio.get_running_loop().call_soon(callback, self._close_exc)
        else:
            self._close_callbacks.append(callback)

    def _on_final_status(self, final_status: Future[None]) -> None:
        exc = None if final_status.cancelled() else final_status.exception()
        self._close_exc = exc
        self._close_notified = True
        callbacks = self._close_callbacks
        self._close_callbacks = []
        for callback in callbacks:
            try:
                callback(exc)
            except Exception:
                logger.exception(f"{self}: Exception in close callback")

    def _on_data_received(self, data: bytes) -> None:
        """Splits received bytes into responses and dispatches them."""
        if self.response_terminator is None:
            self._dispatch_response(data)
            return
        self._read_buffer.extend(data)
        terminator = self.response_terminator
        while True:
            index = self._read_buffer.find(terminator)
            if index < 0:
                break
            response = bytes(self._read_buffer[:index])
            del self._read_buffer[:index + len(terminator)]
            self._dispatch_response(response)

    def _dispatch_response(self, response: bytes) -> None:
        """Completes the oldest outstanding command with a response.

        A command whose caller gave up (cancelled) still consumes its response,
        so that later commands stay lined up with their own responses.
        """
        if len(self._pending) == 0:
            logger.debug(f"{self}: Discarding unsolicited response: {response.hex(' ')}")
            return
        future = self._pending.popleft()
        if future.done():
            logger.debug(f"{self}: Discarding response to abandoned command: {response.hex(' ')}")
        else:
            future.set_result(response)

    async def _read_loop(self) -> None:
        """Reads from the socket until EOF or error, then shuts the transport down."""
        assert self.reader is not None

        exc: Optional[BaseException] = None
        try:
            while True:
                data = await self.reader.read(READ_CHUNK_SIZE)
                if len(data) == 0:
                    logger.debug(f"{self}: Connection closed by projector")
                    break
                logger.debug(f"{self}: Read {len(data)} bytes: {data.hex(' ')}")
                self._on_data_received(data)
        except Exception as e:
            exc = TransportError(f"Error reading from projector: {e}")
            exc.__cause__ = e
        await self.shutdown(exc)

    async def _write_exactly(self, data: bytes | bytearray | memoryview) -> None:
        """Writes exactly the specified bytes to the projector, with timeout.

        On error, the transport will be shut down, and no further interaction is possible.
        """
        assert self.writer is not None

        try:
            logger.debug(f"{self}: Writing exactly {len(data)} bytes: {bytes(data).hex(' ')}")
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), self.timeout_secs)
        except asyncio.TimeoutError as e:
            exc = TransportError(f"Timed out writing to projector")
            await self.shutdown(exc)
            raise exc from e
        except (OSError, RuntimeError) as e:
            exc = TransportError(f"Error writing to projector: {e}")
            await self.shutdown(exc)
            raise exc from e

    # @abstractmethod
    async def transact(
            self,
            command_data: bytes,
            timeout_secs: Optional[float]=None,
          ) -> bytes:
        """Writes command bytes and waits for the response bytes.

        Exactly one write is issued per call. If no response arrives within
        the timeout, ResponseTimeoutError is raised and the transport is shut
        down, since later responses could no longer be matched to their commands.
        """
        if self.writer is None or self.is_shutting_down():
            raise NotConnectedError(f"{self}: Not connected to projector")
        if timeout_secs is None:
            timeout_secs = self.timeout_secs

        # Registering the response future and writing the command happen with no
        # suspension in between, so response order always matches write order.
        future: Future[bytes] = asyncio.get_running_loop().create_future()
        self._pending.append(future)
        try:
            await self._write_exactly(command_data)
        except BaseException:
            if future.done() and not future.cancelled():
                # already failed by shutdown; the write error is what the caller sees
                future.exception()
            else:
                future.cancel()
            raise

        try:
            response = await asyncio.wait_for(future, timeout_secs)
        except asyncio.TimeoutError as e:
            exc = ResponseTimeoutError(
                f"{self}: No response from projector within {timeout_secs} seconds")
            await self.shutdown(exc)
            raise exc from e
        logger.debug(f"{self}: Response: {response.hex(' ')}")
        return response

    # @abstractmethod
    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down. Does not wait for the transport to finish
           closing. Safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already shutting down or closed.

        Does not raise an exception based on final status.
        """
        if not self.final_status.done():
            if exc is not None:
                logger.debug(f"{self}: Shutting down with exception: {exc}")
                self.final_status.set_exception(exc)
            else:
                logger.debug(f"{self}: Shutting down")
                self.final_status.set_result(None)
        pending = list(self._pending)
        self._pending.clear()
        for future in pending:
            if not future.done():
                future.set_exception(
                    ConnectionClosedError(f"{self}: Connection closed while waiting for response"))
        try:
            if not self.reader_closed:
                self.reader_closed = True
                if self.reader is not None:
                    self.reader.feed_eof()
        except Exception as e:
            logger.debug("Exception while closing reader", exc_info=True)
        finally:
            try:
                if not self.writer_closed:
                    self.writer_closed = True
                    if self.writer is not None:
                        self.writer.close()
            except Exception as e:
                logger.debug("Exception while closing writer", exc_info=True)

    # @abstractmethod
    async def wait(self) -> None:
        """Waits for complete shutdown/cleanup. Does not initiate shutdown.
        Not safe to call from a callback.

        Returns immediately if the transport is already closed.
        Raises an exception if the final status of the transport is an exception.
        """
        try:
            if self.writer is not None:
                await self.writer.wait_closed()
        except Exception as e:
            logger.debug("Exception while waiting for writer to close", exc_info=True)
            await self.shutdown(e)
        finally:
            if not self.final_status.done():
                await self.shutdown()
        if self.reader_task is not None and self.reader_task is not asyncio.current_task():
            await self.reader_task
        await self.final_status

    # @override
    async def __aenter__(self) -> TcpBarcoProjectorClientTransport:
        """Enters a context that will close the transport on exit."""
        return self

    async def connect(self) -> None:
        """Connect to the projector, with timeout.

        On failure, the transport is closed and TransportError is raised.
        """
        try:
            assert self.reader is None and self.writer is None
            logger.debug(f"Connecting to projector at {self.host}:{self.port}")
            try:
                self.reader, self.writer = await asyncio.wait_for(
                    asyncio.open_connection(self.host, self.port),
                    self.connect_timeout_secs
                  )
            except asyncio.TimeoutError as e:
                raise TransportError(
                    f"Timed out connecting to projector at {self.host}:{self.port}") from e
            except OSError as e:
                raise TransportError(
                    f"Unable to connect to projector at {self.host}:{self.port}: {e}") from e
            self.reader_task = asyncio.ensure_future(self._read_loop())
            logger.debug(f"{self}: Connected")
        except BaseException as e:
            await self.shutdown(e)
            try:
                await self.wait()
            except BaseException as wait_exc:
                if wait_exc is not e:
                    logger.debug(f"{self}: Exception while cleaning up failed connect", exc_info=True)
            raise

    @classmethod
    async def create(
            cls,
            host: str,
            port: int=DEFAULT_PORT,
            timeout_secs: Optional[float]=DEFAULT_TIMEOUT,
            connect_timeout_secs: float=CONNECT_TIMEOUT,
            response_terminator: Optional[bytes]=None,
          ) -> Self:
        """Creates and connects a transport to
           a Barco Projector that is reachable over TCP/IP.

              Args:
                host: The hostname or IP address of the projector.
                port: The TCP/IP port number. Defaults to the Barco
                      control port (3023).
                timeout_secs: The default timeout for command responses.
                      None waits forever.
                connect_timeout_secs: The timeout for establishing the
                      TCP connection.
                response_terminator: If not None, the byte sequence that
                      ends each response.
        """
        transport = cls(
            host,
            port=port,
            timeout_secs=timeout_secs,
            connect_timeout_secs=connect_timeout_secs,
            response_terminator=response_terminator,
          )
        await transport.connect()
        # on error, the transport will be shut down, and no further interaction is possible
        return transport

    def __str__(self) -> str:
        return f"TcpBarcoProjectorClientTransport({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
