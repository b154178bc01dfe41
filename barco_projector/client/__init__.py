# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector client.

Provides a heartbeat-keeping, auto-reconnecting client for a Barco projector on TCP/IP.
"""

from .resolve_host import resolve_projector_tcp_host
from .client_config import BarcoProjectorClientConfig
from .client_transport import BarcoProjectorClientTransport
from .tcp_client_transport import TcpBarcoProjectorClientTransport
from .connector import BarcoProjectorConnector
from .tcp_connector import TcpBarcoProjectorConnector
from .reconnect_policy import (
    ReconnectPolicy,
    FixedDelayReconnectPolicy,
    ExponentialBackoffReconnectPolicy,
    create_reconnect_policy,
  )
from .simple import barco_projector_transport_connect, barco_projector_connect
from .client_impl import (
    BarcoProjectorClient,
    ConnectionState,
  )
