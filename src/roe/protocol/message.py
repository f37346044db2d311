""" A class representation of a channel frame, plus the encode and decode
    steps that move a frame to and from its textual wire form.
"""

from .. import json
from . import fields


class MalformedFrameError(ValueError):
    """ Inbound text could not be interpreted as a frame.
    """


class Frame:
    """ The :class:`Frame` is the unit of exchange on the wire: a JSON
        object with four fields.

        :ivar topic: The channel this frame belongs to.
        :ivar event: The event name; a few are reserved by the protocol,
                     the rest belong to the application.
        :ivar payload: A dictionary whose contents are the business of the
                       receiver, not of this layer.
        :ivar ref: Correlation reference used to tie a reply back to its
                   request. Heartbeats carry None.
    """

    def __init__(self, topic, event, payload=None, ref=None):

        if payload is None:
            payload = dict()

        self.topic = topic
        self.event = event
        self.payload = payload
        self.ref = ref


    def __eq__(self, other):
        if not isinstance(other, Frame):
            return NotImplemented

        return self.to_dict() == other.to_dict()


    def __repr__(self):
        return 'Frame(%r, %r, %r, ref=%r)' % (self.topic, self.event, self.payload, self.ref)


    @property
    def status(self):
        """ The status field of a reply payload, or None if there isn't one.
        """

        try:
            return self.payload['status']
        except (KeyError, TypeError):
            return None


    def to_dict(self):
        frame = dict()
        frame['topic'] = self.topic
        frame['event'] = self.event
        frame['payload'] = self.payload
        frame['ref'] = self.ref
        return frame


    def encode(self):
        """ Return the wire representation of this frame as a string.
        """

        return json.dumps_text(self.to_dict())


# end of class Frame



def decode(text):
    """ Interpret *text* (str or bytes) as a :class:`Frame`. Raise
        :class:`MalformedFrameError` if it is not a JSON object with at
        least an event name.
    """

    try:
        parsed = json.loads(text)
    except (json.DecodeError, TypeError, UnicodeDecodeError) as e:
        raise MalformedFrameError('not valid JSON: ' + str(e))

    if not isinstance(parsed, dict):
        raise MalformedFrameError('frame is not a JSON object: ' + repr(parsed))

    event = parsed.get('event')
    if not isinstance(event, str) or event == '':
        raise MalformedFrameError('frame has no event name: ' + repr(parsed))

    topic = parsed.get('topic')
    payload = parsed.get('payload')
    ref = normalize_ref(parsed.get('ref'))

    return Frame(topic, event, payload, ref)



def normalize_ref(ref):
    """ Servers may echo a reference back as a string even if it was sent
        as a number. Numeric strings become integers; anything else is
        returned unchanged.

        A boolean is not a usable reference and becomes None.
    """

    if isinstance(ref, bool):
        return None

    if isinstance(ref, str):
        try:
            return int(ref)
        except ValueError:
            return ref

    return ref



def heartbeat():
    """ Return a new heartbeat :class:`Frame`.
    """

    return Frame(fields.SYSTEM_TOPIC, fields.HEARTBEAT, dict(), None)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
