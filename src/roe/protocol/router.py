""" Inbound frames are classified here and handed off: protocol replies go
    back to the session, everything else goes to whichever handler was
    registered for the event name.
"""

import logging
import types

from . import fields
from . import message

logger = logging.getLogger(__name__)


class Router:
    """ Route frames for a single *topic*. The *handlers* mapping associates
        an event name with a callable that receives the frame payload; it is
        copied on construction and cannot be changed afterward. *replies* is
        invoked with the full :class:`message.Frame` for every reply frame.
        *counter* is an iterator of correlation references, owned by the
        session, consumed by :func:`encode`.
    """

    def __init__(self, topic, handlers, replies, counter):

        self.topic = topic
        self.handlers = types.MappingProxyType(dict(handlers))
        self.replies = replies
        self.counter = counter


    def encode(self, event, payload=None):
        """ Return a new :class:`message.Frame` for this router's topic,
            stamped with the next correlation reference.
        """

        ref = next(self.counter)
        return message.Frame(self.topic, event, payload, ref)


    def dispatch(self, text):
        """ Decode and route one inbound frame. Malformed input is logged and
            dropped; so are frames for another topic, and frames whose event
            has no registered handler. The decoded frame is returned, or None
            if nothing could be decoded.
        """

        try:
            frame = message.decode(text)
        except message.MalformedFrameError as e:
            logger.warning('dropping malformed frame: %s', e)
            return None

        if frame.event == fields.REPLY:
            self.replies(frame)
            return frame

        if frame.topic != self.topic:
            logger.debug('dropping %r for foreign topic %r', frame.event, frame.topic)
            return frame

        try:
            handler = self.handlers[frame.event]
        except KeyError:
            logger.debug('no handler for %r on %s, dropped', frame.event, self.topic)
            return frame

        try:
            handler(frame.payload)
        except Exception:
            logger.exception('handler for %r raised', frame.event)

        return frame


# end of class Router


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
