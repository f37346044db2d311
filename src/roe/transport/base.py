"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`roe.protocol` so the protocol remains transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class NotOpenError(TransportError):
    """A send was attempted on a handle that is not open."""


class Listener:
    """Receiver of the notifications a :class:`Handle` emits.

    Every handle produces at most one ``on_open``, then any number of
    ``on_message`` and ``on_error`` calls, and finally exactly one
    ``on_close``. An error notification never ends the handle by itself.
    Notifications may arrive on any thread.
    """

    def on_open(self, handle: Handle) -> None:
        pass

    def on_message(self, handle: Handle, text: str) -> None:
        pass

    def on_error(self, handle: Handle, error: Any) -> None:
        pass

    def on_close(self, handle: Handle, code: int, reason: str) -> None:
        pass


class Handle(ABC):
    """One socket connection, from connect to close."""

    url: str = ''

    @abstractmethod
    def send(self, text: str) -> None:
        """Transmit one text frame; raise :class:`NotOpenError` if not open."""

    @abstractmethod
    def close(self, code: int, reason: str = '') -> None:
        """Request shutdown; the close notification carries *code*."""

    @property
    def is_open(self) -> bool:
        """Whether the handle can currently send."""
        return False


class Transport(ABC):
    """Factory for :class:`Handle` instances."""

    @abstractmethod
    def connect(self, url: str, listener: Listener) -> Handle:
        """Start opening a socket to *url*; return without waiting.

        Failure to connect is reported through *listener*, never raised.
        """
