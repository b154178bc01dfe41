# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector TCP/IP client connector.

Provides a connector for a BarcoProjectorClientTransport over a TCP/IP
socket.
"""

from __future__ import annotations

from ..internal_types import *
from .connector import BarcoProjectorConnector
from .client_transport import BarcoProjectorClientTransport
from .client_config import BarcoProjectorClientConfig
from .resolve_host import resolve_projector_tcp_host

from .tcp_client_transport import TcpBarcoProjectorClientTransport

class TcpBarcoProjectorConnector(BarcoProjectorConnector):
    """Barco Projector TCP/IP client transport connector."""

    config: BarcoProjectorClientConfig
    host: str
    port: int

    def __init__(
            self,
            host: Optional[str]=None,
            port: Optional[int]=None,
            config: Optional[BarcoProjectorClientConfig]=None,
          ) -> None:
        """Creates a connector that can create transports to
           a Barco Projector that is reachable over TCP/IP.

              Args:
                host: The hostname or IPV4 address of the projector.
                      may optionally be prefixed with "tcp://".
                      May be suffixed with ":<port>" to specify a
                      non-default port, which will override the port argument.
                      If None, the host will be taken from the config.
                port: The default TCP/IP port number to use. If None, the port
                      will be taken from the config.
                config: A BarcoProjectorClientConfig object that specifies
                        the default host, port, timeouts, etc to use.
                        If None, a default config will be created.
        """
        super().__init__()
        self.config = BarcoProjectorClientConfig(
            default_host=host,
            default_port=port,
            base_config=config
          )
        self.host, self.port = resolve_projector_tcp_host(
            self.config.default_host,
            self.config.default_port
          )

    # @abstractmethod
    async def connect(self) -> BarcoProjectorClientTransport:
        """Create and connect a TCP/IP client transport for the projector
           associated with this connector.
        """
        transport = await TcpBarcoProjectorClientTransport.create(
            self.host,
            port=self.port,
            timeout_secs=self.config.timeout_secs,
            connect_timeout_secs=self.config.connect_timeout_secs,
            response_terminator=self.config.response_terminator,
          )
        return transport

    def __str__(self) -> str:
        return f"TcpBarcoProjectorConnector(host='{self.host}', port={self.port})"

    def __repr__(self) -> str:
        return str(self)
