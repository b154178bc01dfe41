# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector client abstract transport connector interface.

Provides a low-level abstract interface for objects that can create
connected transports to a Barco projector. The client uses a connector
both for the initial connection and for every reconnection.
This abstraction allows for the implementation of proxies and alternate network
transports.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..internal_types import *
from .client_transport import BarcoProjectorClientTransport

class BarcoProjectorConnector(ABC):
    """Abstract base class for Barco Projector client transport connectors."""

    @abstractmethod
    async def connect(self) -> BarcoProjectorClientTransport:
        """Create and connect a client transport for the projector
           associated with this connector.

        Must be implemented by subclasses.
        """
        raise NotImplementedError()
