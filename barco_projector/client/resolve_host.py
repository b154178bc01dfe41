# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector host IP/Port resolver.

Provides a method that can resolve host specifier strings into a projector
IP address and port.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import BarcoProjectorError
from ..constants import DEFAULT_PORT

def resolve_projector_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
      ) -> Tuple[str, int]:
    """Resolves a projector host string into a hostname and port.

        Args:
            host: The hostname or IPV4 address of the projector.
                    may optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
            default_port: The default TCP/IP port number to use. If None, the
                    default Barco control port (3023) is used.

        Returns:
            A tuple of (hostname: str, port: int).
    """
    if host is None or host == '':
        raise BarcoProjectorError("No projector host provided")

    if default_port is None or default_port <= 0:
        default_port = DEFAULT_PORT

    if host.startswith('tcp://'):
        host = host[6:]
    elif '://' in host:
        raise BarcoProjectorError(f"Invalid host protocol specifier for TCP transport: '{host}'")

    port: int
    if host.startswith('['):
        # bracketed IPv6 literal, e.g. "[fe80::1]:3023"
        bracket_end = host.find(']')
        if bracket_end < 0:
            raise BarcoProjectorError(f"Unterminated IPv6 address in host specifier: '{host}'")
        rest = host[bracket_end+1:]
        host = host[1:bracket_end]
        if rest.startswith(':'):
            port = _parse_port(rest[1:])
        elif rest == '':
            port = default_port
        else:
            raise BarcoProjectorError(f"Invalid host specifier: '{rest}'")
    elif host.count(':') == 1:
        host, port_str = host.rsplit(':', 1)
        port = _parse_port(port_str)
    else:
        port = default_port

    if host == '':
        raise BarcoProjectorError("Empty projector hostname")

    return (host, port)

def _parse_port(port_str: str) -> int:
    try:
        port = int(port_str)
    except ValueError as e:
        raise BarcoProjectorError(f"Invalid port number: '{port_str}'") from e
    if port <= 0 or port > 65535:
        raise BarcoProjectorError(f"Port number out of range: {port}")
    return port
