# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector client configuration.

Provides a general config object for a BarcoProjectorClient and the
transports it creates.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import BarcoProjectorError
from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_ENCODING,
    CONNECT_TIMEOUT,
    HEARTBEAT_INTERVAL,
    HEARTBEAT_COMMAND,
    RECONNECT_DELAY,
    MAX_RECONNECT_DELAY,
    RECONNECT_BACKOFF_MULTIPLIER,
    RECONNECT_POLICY_FIXED,
    RECONNECT_POLICIES,
  )

_UNSET: Any = object()
"""Sentinel for arguments where None is a meaningful value."""

class BarcoProjectorClientConfig:
    """Barco Projector client configuration."""
    default_host: Optional[str]
    default_port: int
    timeout_secs: Optional[float]
    connect_timeout_secs: float
    heartbeat_interval_secs: float
    heartbeat_command: str
    reconnect_delay_secs: float
    reconnect_policy: str
    max_reconnect_delay_secs: float
    reconnect_backoff_multiplier: float
    auto_reconnect: bool
    response_terminator: Optional[bytes]
    encoding: str

    def __init__(
            self,
            default_host: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            timeout_secs: Optional[float]=_UNSET,
            connect_timeout_secs: Optional[float]=None,
            heartbeat_interval_secs: Optional[float]=None,
            heartbeat_command: Optional[str]=None,
            reconnect_delay_secs: Optional[float]=None,
            reconnect_policy: Optional[str]=None,
            max_reconnect_delay_secs: Optional[float]=None,
            reconnect_backoff_multiplier: Optional[float]=None,
            auto_reconnect: Optional[bool]=None,
            response_terminator: Optional[bytes]=_UNSET,
            encoding: Optional[str]=None,
            base_config: Optional[BarcoProjectorClientConfig]=None
          ) -> None:
        """Creates a configuration for a Barco Projector client.

           Args:
             default_host: The default hostname or IPV4 address of the projector.
                   may optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   If None, there is no default host, and one must be given
                   to the client or connector.
             default_port: The default TCP/IP port number to use.
                    If None, the default Barco control port (3023) is used.
             timeout_secs:
                   The timeout for a command response, in seconds. None
                   waits forever. If not provided, DEFAULT_TIMEOUT is used.
             connect_timeout_secs:
                   The timeout for establishing the TCP connection, in seconds.
             heartbeat_interval_secs:
                   The interval between heartbeat commands, in seconds.
             heartbeat_command:
                   The command sent on each heartbeat. Defaults to "NOOP".
             reconnect_delay_secs:
                   The delay before reconnecting after the connection closes, in
                   seconds. For the exponential policy, this is the initial delay.
             reconnect_policy:
                   "fixed" (the default) or "exponential".
             max_reconnect_delay_secs:
                   For the exponential policy, the upper bound on the delay.
             reconnect_backoff_multiplier:
                   For the exponential policy, the growth factor per failed attempt.
             auto_reconnect:
                   If True (the default), the client reconnects whenever the
                   connection closes.
             response_terminator:
                   If not None, responses are framed on this byte sequence
                   instead of one response per socket read.
             encoding:
                   Text encoding for commands and responses.
             base_config:
                     An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if timeout_secs is not _UNSET:
            self.timeout_secs = timeout_secs

        if connect_timeout_secs is not None:
            self.connect_timeout_secs = connect_timeout_secs

        if heartbeat_interval_secs is not None:
            if heartbeat_interval_secs <= 0:
                raise BarcoProjectorError(f"Heartbeat interval must be positive: {heartbeat_interval_secs}")
            self.heartbeat_interval_secs = heartbeat_interval_secs

        if heartbeat_command is not None:
            self.heartbeat_command = heartbeat_command

        if reconnect_delay_secs is not None:
            if reconnect_delay_secs < 0:
                raise BarcoProjectorError(f"Reconnect delay must not be negative: {reconnect_delay_secs}")
            self.reconnect_delay_secs = reconnect_delay_secs

        if reconnect_policy is not None:
            if not reconnect_policy in RECONNECT_POLICIES:
                raise BarcoProjectorError(f"Unknown reconnect policy: {reconnect_policy}")
            self.reconnect_policy = reconnect_policy

        if max_reconnect_delay_secs is not None:
            self.max_reconnect_delay_secs = max_reconnect_delay_secs

        if reconnect_backoff_multiplier is not None:
            if reconnect_backoff_multiplier < 1.0:
                raise BarcoProjectorError(f"Reconnect backoff multiplier must be >= 1.0: {reconnect_backoff_multiplier}")
            self.reconnect_backoff_multiplier = reconnect_backoff_multiplier

        if auto_reconnect is not None:
            self.auto_reconnect = auto_reconnect

        if response_terminator is not _UNSET:
            if response_terminator is not None and len(response_terminator) == 0:
                response_terminator = None
            self.response_terminator = response_terminator

        if encoding is not None:
            self.encoding = encoding

    def init_from_defaults(self) -> None:
        """Initializes the configuration from defaults."""
        self.default_host = None
        self.default_port = DEFAULT_PORT
        self.timeout_secs = DEFAULT_TIMEOUT
        self.connect_timeout_secs = CONNECT_TIMEOUT
        self.heartbeat_interval_secs = HEARTBEAT_INTERVAL
        self.heartbeat_command = HEARTBEAT_COMMAND
        self.reconnect_delay_secs = RECONNECT_DELAY
        self.reconnect_policy = RECONNECT_POLICY_FIXED
        self.max_reconnect_delay_secs = MAX_RECONNECT_DELAY
        self.reconnect_backoff_multiplier = RECONNECT_BACKOFF_MULTIPLIER
        self.auto_reconnect = True
        self.response_terminator = None
        self.encoding = DEFAULT_ENCODING

    def init_from_base_config(self, base_config: BarcoProjectorClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.timeout_secs = base_config.timeout_secs
        self.connect_timeout_secs = base_config.connect_timeout_secs
        self.heartbeat_interval_secs = base_config.heartbeat_interval_secs
        self.heartbeat_command = base_config.heartbeat_command
        self.reconnect_delay_secs = base_config.reconnect_delay_secs
        self.reconnect_policy = base_config.reconnect_policy
        self.max_reconnect_delay_secs = base_config.max_reconnect_delay_secs
        self.reconnect_backoff_multiplier = base_config.reconnect_backoff_multiplier
        self.auto_reconnect = base_config.auto_reconnect
        self.response_terminator = base_config.response_terminator
        self.encoding = base_config.encoding

    def to_jsonable(self) -> JsonableDict:
        """Converts the configuration to a JSON-serializable dictionary."""
        return dict(
            default_host=self.default_host,
            default_port=self.default_port,
            timeout_secs=self.timeout_secs,
            connect_timeout_secs=self.connect_timeout_secs,
            heartbeat_interval_secs=self.heartbeat_interval_secs,
            heartbeat_command=self.heartbeat_command,
            reconnect_delay_secs=self.reconnect_delay_secs,
            reconnect_policy=self.reconnect_policy,
            max_reconnect_delay_secs=self.max_reconnect_delay_secs,
            reconnect_backoff_multiplier=self.reconnect_backoff_multiplier,
            auto_reconnect=self.auto_reconnect,
            response_terminator=(
                None if self.response_terminator is None else
                self.response_terminator.decode(self.encoding)),
            encoding=self.encoding,
          )

    @classmethod
    def from_jsonable(cls, jsonable: JsonableDict) -> BarcoProjectorClientConfig:
        """Creates a configuration from a JSON-serializable dictionary.

        Missing keys fall back to defaults.
        """
        kwargs: Dict[str, Any] = dict(jsonable)
        terminator = kwargs.pop('response_terminator', _UNSET)
        encoding = kwargs.get('encoding') or DEFAULT_ENCODING
        if isinstance(terminator, str):
            terminator = terminator.encode(encoding)
        default_host = kwargs.pop('default_host', None)
        return cls(default_host, response_terminator=terminator, **kwargs)

    def __str__(self) -> str:
        return (
            f"BarcoProjectorClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"timeout_secs={self.timeout_secs!r}, "
            f"heartbeat_interval_secs={self.heartbeat_interval_secs!r}, "
            f"reconnect_policy={self.reconnect_policy!r})"
          )

    def __repr__(self) -> str:
        return str(self)
