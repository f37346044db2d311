""" Wire-level pieces of the channel protocol: the reserved vocabulary, the
    :class:`message.Frame` model, and the :class:`router.Router` that
    classifies inbound frames. Nothing here knows about sockets.
"""

from . import fields
from . import message
from . import router

from .message import Frame, MalformedFrameError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
