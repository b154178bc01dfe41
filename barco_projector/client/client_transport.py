# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector client abstract transport interface.

Provides a low-level abstract interface for writing opaque command bytes
to a Barco projector and receiving opaque response bytes. Does not provide
heartbeats, reconnection, or any higher-level abstractions such as semantic
commands or responses.

This abstraction allows for the implementation of proxies and alternate network
transports.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from ..internal_types import *
from ..pkg_logging import logger


class BarcoProjectorClientTransport(ABC):
    @abstractmethod
    async def transact(
            self,
            command_data: bytes,
            timeout_secs: Optional[float]=None,
          ) -> bytes:
        """Writes command bytes and waits for the response bytes.

        Responses are matched to commands in the order the commands were
        written. If timeout_secs is None, the transport's default timeout
        is used.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def is_shutting_down(self) -> bool:
        """Returns True if the transport is shutting down or closed.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    def add_close_callback(self, callback: CloseCallback) -> None:
        """Registers a callback to be invoked once, from the event loop, after
           the transport begins shutting down. The callback receives the
           exception that caused the shutdown, or None.

        If the transport is already shutting down, the callback is scheduled
        immediately.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    async def shutdown(self, exc: Optional[BaseException] = None) -> None:
        """Shuts the transport down. Does not wait for the transport to finish
           closing. Safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already shutting down or closed.

        Does not raise an exception based on final status.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    @abstractmethod
    async def wait(self) -> None:
        """Waits for complete shutdown/cleanup. Does not initiate shutdown
        Not safe to call from a callback.

        Returns immediately if the transport is already closed.
        Raises an exception if the final status of the transport is an exception.

        Must be implemented by a subclass.
        """
        raise NotImplementedError()

    async def aclose(self, exc: Optional[BaseException] = None) -> None:
        """Closes the transport and waits for complete shutdown/cleanup.
        Not safe to call from a callback.

        If exc is not None, sets the final status of the transport.

        Has no effect if the transport is already closed.

        Raises an exception if the final status of the transport is an exception.

        May be overridden by subclasses. The default implementation simply calls
        shutdown() and then wait().
        """
        await self.shutdown(exc)
        await self.wait()

    async def __aenter__(self) -> BarcoProjectorClientTransport:
        """Enters a context that will close the transport on exit."""
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        """Exits the context, closes the transport, and waits for complete shutdown/cleanup."""
        # Close the transport without raising an exception
        closer: asyncio.Task[None] = asyncio.ensure_future(self.aclose(exc))
        assert isinstance(closer, asyncio.Task)
        done, pending = await asyncio.wait([closer])
        assert len(done) == 1 and len(pending) == 0
        if exc is None:
            # raise the exception from the transport if there is one
            closer.result()
        else:
            close_exc = closer.exception()
            logger.debug(f"{self}: Closed on exception: {exc}, final status: {close_exc}")
