# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector client.

Owns at most one connection to a projector at a time, sends raw text
commands over it, keeps it alive with a periodic heartbeat, and reconnects
whenever it closes.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..exceptions import BarcoProjectorError, NotConnectedError
from ..pkg_logging import logger

from .client_config import BarcoProjectorClientConfig
from .client_transport import BarcoProjectorClientTransport
from .connector import BarcoProjectorConnector
from .tcp_connector import TcpBarcoProjectorConnector
from .reconnect_policy import ReconnectPolicy, create_reconnect_policy

class ConnectionState(Enum):
    """Connection state of a BarcoProjectorClient."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class BarcoProjectorClient:
    """Barco Projector TCP/IP client with heartbeat and automatic reconnect."""

    config: BarcoProjectorClientConfig
    connector: BarcoProjectorConnector
    reconnect_policy: ReconnectPolicy
    host: Optional[str]
    port: Optional[int]

    state: ConnectionState = ConnectionState.DISCONNECTED
    transport: Optional[BarcoProjectorClientTransport] = None
    heartbeat_task: Optional[asyncio.Task[None]] = None
    reconnect_task: Optional[asyncio.Task[None]] = None

    _connect_lock: asyncio.Lock
    """Serializes connect attempts, so that a reconnect racing an explicit
    connect() never opens a second transport."""

    _reaper_tasks: Set[asyncio.Task[None]]

    def __init__(
            self,
            host: Optional[str]=None,
            port: Optional[int]=None,
            heartbeat_interval_secs: Optional[float]=None,
            *,
            config: Optional[BarcoProjectorClientConfig]=None,
            connector: Optional[BarcoProjectorConnector]=None,
            reconnect_policy: Optional[ReconnectPolicy]=None,
          ) -> None:
        """Creates a client. Does not connect.

           Args:
             host: The hostname or IPV4 address of the projector. May be
                   prefixed with "tcp://" and suffixed with ":<port>".
                   If None, the host is taken from the config.
             port: The TCP/IP port. Defaults to 3023.
             heartbeat_interval_secs: Seconds between heartbeats. Defaults to 30.
                   All durations in this package are in seconds, so an
                   interval of 30000 milliseconds is given as 30.0.
             config: Base configuration for everything not given explicitly.
             connector: The connector used to create transports. If None, a
                   TCP connector for host/port is created.
             reconnect_policy: The reconnect delay policy. If None, one is
                   created from the configuration.
        """
        self.config = BarcoProjectorClientConfig(
            default_host=host,
            default_port=port,
            heartbeat_interval_secs=heartbeat_interval_secs,
            base_config=config,
          )
        if connector is None:
            tcp_connector = TcpBarcoProjectorConnector(config=self.config)
            self.host = tcp_connector.host
            self.port = tcp_connector.port
            connector = tcp_connector
        else:
            self.host = self.config.default_host
            self.port = self.config.default_port
        self.connector = connector
        self.reconnect_policy = (
            create_reconnect_policy(self.config) if reconnect_policy is None else reconnect_policy)
        self._connect_lock = asyncio.Lock()
        self._reaper_tasks = set()

    @property
    def is_connected(self) -> bool:
        """True if a transport is currently open."""
        return self.state == ConnectionState.CONNECTED

    async def connect(self) -> None:
        """Connects to the projector and starts the heartbeat.

        Returns as soon as the connection is established. Returns immediately
        if already connected. Raises TransportError if the connection cannot
        be established; a failed call does not by itself schedule a reconnect.
        """
        async with self._connect_lock:
            if self.state == ConnectionState.CLOSED:
                raise BarcoProjectorError(f"{self}: Client is closed")
            if self.state == ConnectionState.CONNECTED:
                return
            self.state = ConnectionState.CONNECTING
            try:
                transport = await self.connector.connect()
            except BaseException:
                if self.state == ConnectionState.CONNECTING:
                    self.state = ConnectionState.DISCONNECTED
                raise
            if self.state == ConnectionState.CLOSED:
                # closed while connecting
                self._reap_transport(transport, shutdown=True)
                raise BarcoProjectorError(f"{self}: Client closed while connecting")
            self.transport = transport
            self.state = ConnectionState.CONNECTED
            self.reconnect_policy.reset()
            logger.info(f"Connected to projector at {self.host} on port {self.port}")
            transport.add_close_callback(
                lambda exc: self._on_transport_closed(transport, exc))
            self.start_heartbeat()

    def _on_transport_closed(
            self,
            transport: BarcoProjectorClientTransport,
            exc: Optional[BaseException],
          ) -> None:
        """Called from the event loop once a transport starts shutting down."""
        if transport is not self.transport:
            # stale transport; already released
            return
        if exc is None:
            logger.info(f"{self}: Connection closed normally")
        else:
            logger.warning(f"{self}: Connection closed due to an error: {exc}")
        self.stop_heartbeat()
        self.transport = None
        self._reap_transport(transport)
        if self.state == ConnectionState.CLOSED:
            return
        self.state = ConnectionState.DISCONNECTED
        if self.config.auto_reconnect:
            self.schedule_reconnect()

    def _reap_transport(self, transport: BarcoProjectorClientTransport, shutdown: bool=False) -> None:
        """Waits for a released transport to finish closing, in the background."""
        async def reap() -> None:
            try:
                if shutdown:
                    await transport.shutdown()
                await transport.wait()
            except Exception as e:
                logger.debug(f"{self}: Transport {transport} closed with: {e}")
        task = asyncio.ensure_future(reap())
        self._reaper_tasks.add(task)
        task.add_done_callback(self._reaper_tasks.discard)

    async def send_command(self, command: str, timeout_secs: Optional[float]=None) -> str:
        """Sends a raw command and returns the projector's response text.

        The command is written exactly as given; no terminator is appended.
        Responses are matched to commands in the order the commands were written.

        Raises NotConnectedError if there is no open connection, in which case
        nothing is written. Raises ResponseTimeoutError if no response arrives
        within timeout_secs (default from the config); the connection is
        then closed and re-established.
        """
        transport = self.transport
        if self.state != ConnectionState.CONNECTED or transport is None:
            raise NotConnectedError(f"{self}: Not connected to projector")
        response = await transport.transact(
            command.encode(self.config.encoding),
            timeout_secs=timeout_secs,
          )
        return response.decode(self.config.encoding, errors='replace')

    def start_heartbeat(self) -> None:
        """Starts sending the heartbeat command at the configured interval.

        Replaces any heartbeat already running.
        """
        self.stop_heartbeat()
        self.heartbeat_task = asyncio.ensure_future(self._heartbeat_loop())

    def stop_heartbeat(self) -> None:
        """Stops the heartbeat. Safe to call when it is not running."""
        heartbeat_task = self.heartbeat_task
        self.heartbeat_task = None
        if heartbeat_task is not None and not heartbeat_task.done():
            heartbeat_task.cancel()

    async def _heartbeat_loop(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.config.heartbeat_interval_secs
        next_tick = loop.time() + interval
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            next_tick = max(next_tick + interval, loop.time())
            try:
                response = await self.send_command(self.config.heartbeat_command)
                logger.info(f"Projector heartbeat response: {response!r}")
            except BarcoProjectorError as e:
                logger.error(f"Projector heartbeat error: {e}")

    def schedule_reconnect(self) -> None:
        """Starts the background reconnect task, unless one is already running
           or the client is closed."""
        if self.state == ConnectionState.CLOSED:
            return
        if self.reconnect_task is not None and not self.reconnect_task.done():
            logger.debug(f"{self}: Reconnection already in progress")
            return
        self.reconnect_task = asyncio.ensure_future(self.reconnect())

    async def reconnect(self) -> None:
        """Waits the reconnect policy's delay, then connects. Repeats until
           connected or closed; failed attempts are logged."""
        while self.state == ConnectionState.DISCONNECTED:
            delay = self.reconnect_policy.next_delay()
            logger.debug(f"{self}: Reconnecting in {delay} seconds")
            await asyncio.sleep(delay)
            if self.state != ConnectionState.DISCONNECTED:
                break
            logger.info(f"{self}: Attempting to reconnect...")
            try:
                await self.connect()
            except BarcoProjectorError as e:
                logger.error(f"{self}: Reconnection failed: {e}")
            except Exception as e:
                logger.exception(f"{self}: Reconnection failed with unexpected exception: {e}")

    async def aclose(self) -> None:
        """Closes the client for good: stops the heartbeat and reconnects and
           closes the current connection."""
        if self.state == ConnectionState.CLOSED:
            return
        logger.debug(f"{self}: Closing")
        self.state = ConnectionState.CLOSED
        heartbeat_task = self.heartbeat_task
        self.stop_heartbeat()
        reconnect_task = self.reconnect_task
        self.reconnect_task = None
        tasks: List[asyncio.Task[None]] = []
        for task in (heartbeat_task, reconnect_task):
            if task is not None and task is not asyncio.current_task():
                task.cancel()
                tasks.append(task)
        if len(tasks) > 0:
            await asyncio.gather(*tasks, return_exceptions=True)
        transport = self.transport
        self.transport = None
        if transport is not None:
            try:
                await transport.aclose()
            except Exception as e:
                logger.debug(f"{self}: Transport closed with: {e}")
        if len(self._reaper_tasks) > 0:
            await asyncio.gather(*list(self._reaper_tasks), return_exceptions=True)

    async def __aenter__(self) -> BarcoProjectorClient:
        logger.debug(f"{self}: Entering async context manager")
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
          ) -> None:
        logger.debug(f"{self}: Exiting async context manager, exc={exc_val}")
        await self.aclose()

    @classmethod
    async def create(
            cls,
            host: Optional[str]=None,
            port: Optional[int]=None,
            heartbeat_interval_secs: Optional[float]=None,
            *,
            config: Optional[BarcoProjectorClientConfig]=None,
          ) -> Self:
        """Creates a client and connects it."""
        self = cls(host, port, heartbeat_interval_secs, config=config)
        try:
            await self.connect()
        except BaseException:
            await self.aclose()
            raise
        return self

    def __str__(self) -> str:
        return f"BarcoProjectorClient({self.host}:{self.port}, {self.state.value})"

    def __repr__(self) -> str:
        return str(self)
