# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Type hints used throughout this package"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    AsyncContextManager,
    AsyncIterator,
    Awaitable,
    Callable,
    Deque,
    Dict,
    List,
    Optional,
    Set,
    Tuple,
    Type,
    Union,
  )

from types import TracebackType

from typing_extensions import Self

Jsonable = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]
"""A type that can be serialized to JSON"""

JsonableDict = Dict[str, Jsonable]
"""A dictionary that can be serialized to JSON"""

CloseCallback = Callable[[Optional[BaseException]], None]
"""A callback invoked once when a transport finishes shutting down. The argument
   is the exception that caused the shutdown, or None for a clean close."""

Responder = Callable[[bytes], Optional[bytes]]
"""An emulator hook that maps received command bytes to response bytes (or None
   for no response)."""
