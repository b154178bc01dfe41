#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from typing import Optional

class BarcoProjectorError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class NotConnectedError(BarcoProjectorError):
  """A command was issued while there is no open connection to the projector."""
  pass

class TransportError(BarcoProjectorError):
  """A low-level socket failure (refused, reset, failed write, etc)."""
  pass

class ResponseTimeoutError(TransportError):
  """The projector did not respond to a command within the timeout."""
  pass

class ConnectionClosedError(TransportError):
  """The connection closed while a command was waiting for its response."""
  pass
