# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Barco Projector emulator.

Provides a simple emulation of a Barco projector control port on TCP/IP.
"""

from .emulator_impl import BarcoProjectorEmulator, echo_responder
from .session import BarcoProjectorEmulatorSession
