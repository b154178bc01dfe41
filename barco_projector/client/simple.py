# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector simple client connection API.

Provides a simple API for connecting to a projector.
"""

from __future__ import annotations

from ..internal_types import *
from .connector import BarcoProjectorConnector
from .client_transport import BarcoProjectorClientTransport
from .tcp_connector import TcpBarcoProjectorConnector
from .client_config import BarcoProjectorClientConfig
from .client_impl import BarcoProjectorClient

async def barco_projector_transport_connect(
        host: Optional[str]=None,
        port: Optional[int]=None,
        config: Optional[BarcoProjectorClientConfig]=None
      ) -> BarcoProjectorClientTransport:
    """Create and connect a bare transport (no heartbeat, no reconnect)
       for a Barco projector from a configuration.

    Args:
        host: The hostname or IPV4 address of the projector.
                may optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port, which will override the port argument.
                If None, the host will be taken from the config.
        port: The TCP/IP port. If None, taken from the config.
        config: A BarcoProjectorClientConfig object that specifies
                the default host, port, timeouts, etc. to use.
                If None, a default config will be created.
    """
    connector = TcpBarcoProjectorConnector(
        host=host,
        port=port,
        config=config
      )
    transport = await connector.connect()
    return transport

async def barco_projector_connect(
        host: Optional[str]=None,
        port: Optional[int]=None,
        config: Optional[BarcoProjectorClientConfig]=None,
        connector: Optional[BarcoProjectorConnector]=None,
      ) -> BarcoProjectorClient:
    """Create and connect a Barco projector client from a configuration.

    The returned client keeps the connection alive with a heartbeat and
    reconnects automatically until it is closed with aclose().

    Args:
        host: The hostname or IPV4 address of the projector.
                may optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port, which will override the port argument.
                If None, the host will be taken from the config.
        port: The TCP/IP port. If None, taken from the config.
        config: A BarcoProjectorClientConfig object that specifies
                the default host, port, heartbeat interval, etc. to use.
                If None, a default config will be created.
        connector: An optional connector to use instead of a TCP
                connector for host/port.
    """
    client = BarcoProjectorClient(
        host,
        port,
        config=config,
        connector=connector,
      )
    try:
        await client.connect()
    except BaseException:
        await client.aclose()
        raise

    return client
