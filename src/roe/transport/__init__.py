"""Transport layer implementations."""

from .base import (
    Handle,
    Listener,
    NotOpenError,
    Transport,
    TransportError,
)

from .websocket import WebSocketHandle, WebSocketTransport
