# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector reconnect policies.

A reconnect policy decides how long the client waits before each attempt to
reestablish a lost connection. Attempts continue forever; only the delay
between them is a matter of policy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..internal_types import *
from ..exceptions import BarcoProjectorError
from ..constants import (
    RECONNECT_POLICY_FIXED,
    RECONNECT_POLICY_EXPONENTIAL,
  )
from .client_config import BarcoProjectorClientConfig

class ReconnectPolicy(ABC):
    """Abstract base class for reconnect delay policies."""

    @abstractmethod
    def next_delay(self) -> float:
        """Returns the delay before the next reconnect attempt, in seconds,
           and advances the policy to the following attempt.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()

    def reset(self) -> None:
        """Called after a successful connect. The default implementation does nothing."""
        pass


class FixedDelayReconnectPolicy(ReconnectPolicy):
    """Waits the same delay before every attempt."""

    delay_secs: float

    def __init__(self, delay_secs: float) -> None:
        super().__init__()
        if delay_secs < 0:
            raise BarcoProjectorError(f"Reconnect delay must not be negative: {delay_secs}")
        self.delay_secs = delay_secs

    # @abstractmethod
    def next_delay(self) -> float:
        return self.delay_secs

    def __str__(self) -> str:
        return f"FixedDelayReconnectPolicy({self.delay_secs})"

    def __repr__(self) -> str:
        return str(self)


class ExponentialBackoffReconnectPolicy(ReconnectPolicy):
    """Grows the delay geometrically with each consecutive attempt, up to a
       maximum. A successful connect resets the delay to its initial value."""

    initial_delay_secs: float
    max_delay_secs: float
    multiplier: float
    current_delay_secs: float

    def __init__(
            self,
            initial_delay_secs: float,
            max_delay_secs: float,
            multiplier: float=2.0,
          ) -> None:
        super().__init__()
        if initial_delay_secs < 0:
            raise BarcoProjectorError(f"Reconnect delay must not be negative: {initial_delay_secs}")
        if max_delay_secs < initial_delay_secs:
            raise BarcoProjectorError(
                f"Maximum reconnect delay {max_delay_secs} is less than initial delay {initial_delay_secs}")
        if multiplier < 1.0:
            raise BarcoProjectorError(f"Reconnect backoff multiplier must be >= 1.0: {multiplier}")
        self.initial_delay_secs = initial_delay_secs
        self.max_delay_secs = max_delay_secs
        self.multiplier = multiplier
        self.current_delay_secs = initial_delay_secs

    # @abstractmethod
    def next_delay(self) -> float:
        delay = self.current_delay_secs
        self.current_delay_secs = min(delay * self.multiplier, self.max_delay_secs)
        return delay

    def reset(self) -> None:
        self.current_delay_secs = self.initial_delay_secs

    def __str__(self) -> str:
        return (
            f"ExponentialBackoffReconnectPolicy("
            f"{self.initial_delay_secs}..{self.max_delay_secs}, x{self.multiplier})"
          )

    def __repr__(self) -> str:
        return str(self)


def create_reconnect_policy(config: BarcoProjectorClientConfig) -> ReconnectPolicy:
    """Creates the reconnect policy selected by a configuration."""
    if config.reconnect_policy == RECONNECT_POLICY_FIXED:
        return FixedDelayReconnectPolicy(config.reconnect_delay_secs)
    if config.reconnect_policy == RECONNECT_POLICY_EXPONENTIAL:
        return ExponentialBackoffReconnectPolicy(
            config.reconnect_delay_secs,
            max(config.max_reconnect_delay_secs, config.reconnect_delay_secs),
            multiplier=config.reconnect_backoff_multiplier,
          )
    raise BarcoProjectorError(f"Unknown reconnect policy: {config.reconnect_policy}")
