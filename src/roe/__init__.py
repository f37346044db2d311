""" Python implementation of a resilient channel session client. A session
    joins one topic over a WebSocket, keeps it alive with heartbeats,
    reconnects according to the close code it receives, and hands
    application events to a host.
"""

# Utility components.

from . import json
from . import loop

# Submodules used by multiple other components.

from . import protocol
from . import transport
from . import config

# Primary public-facing interfaces.

from .host import Host
from .session import JoinRejectedError, Session, State
from .protocol import Frame, MalformedFrameError
from .transport import NotOpenError, TransportError

from . import begin
connect = begin.connect

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
