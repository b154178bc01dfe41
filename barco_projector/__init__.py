# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package barco_projector provides an API for controlling Barco projectors
via their TCP/IP control port.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    BarcoProjectorError,
    NotConnectedError,
    TransportError,
    ResponseTimeoutError,
    ConnectionClosedError,
  )

from .constants import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    HEARTBEAT_INTERVAL,
    HEARTBEAT_COMMAND,
    RECONNECT_DELAY,
  )

from .client import (
    BarcoProjectorClient,
    ConnectionState,
    resolve_projector_tcp_host,
    BarcoProjectorClientTransport,
    TcpBarcoProjectorClientTransport,
    BarcoProjectorConnector,
    TcpBarcoProjectorConnector,
    barco_projector_transport_connect,
    barco_projector_connect,
    BarcoProjectorClientConfig,
    ReconnectPolicy,
    FixedDelayReconnectPolicy,
    ExponentialBackoffReconnectPolicy,
    create_reconnect_policy,
  )
