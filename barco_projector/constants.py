# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by barco_projector"""

DEFAULT_PORT = 3023
"""The listen port number used by the projector for TCP/IP control."""

DEFAULT_TIMEOUT = 5.0
"""The default timeout for waiting on a command response, in seconds."""

CONNECT_TIMEOUT = 15.0
"""The timeout for connecting to the projector over TCP/IP, in seconds."""

HEARTBEAT_INTERVAL = 30.0
"""The interval between heartbeat commands while connected, in seconds."""

HEARTBEAT_COMMAND = "NOOP"
"""The harmless command sent on every heartbeat tick."""

RECONNECT_DELAY = 1.0
"""The delay before a reconnect attempt after the connection closes, in seconds."""

MAX_RECONNECT_DELAY = 60.0
"""The cap on the reconnect delay for the exponential backoff policy, in seconds."""

RECONNECT_BACKOFF_MULTIPLIER = 2.0
"""Growth factor of the reconnect delay per failed attempt for the exponential backoff policy."""

RECONNECT_POLICY_FIXED = "fixed"
RECONNECT_POLICY_EXPONENTIAL = "exponential"
RECONNECT_POLICIES = (RECONNECT_POLICY_FIXED, RECONNECT_POLICY_EXPONENTIAL)

DEFAULT_ENCODING = "utf-8"
"""Encoding used for command and response text."""

READ_CHUNK_SIZE = 4096
"""Maximum number of bytes consumed by a single read from the socket."""
