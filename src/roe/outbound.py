""" Best-effort delivery of application frames. A frame that cannot be sent
    right now (the socket is down, or the channel is not joined yet) stays
    pending with its own retry timer until it goes out or the session
    closes.
"""

import collections
import logging

from .transport.base import NotOpenError

logger = logging.getLogger(__name__)


class Pending:
    """ One frame awaiting transmission.
    """

    def __init__(self, frame):
        self.frame = frame
        self.text = frame.encode()
        self.timer = None
        self.attempts = 0


# end of class Pending



class Outbound:
    """ Ordered retry queue for one session. The *session* provides the
        :func:`transmit` method, which raises :class:`NotOpenError` when
        the frame cannot be sent, and the *loop* used for retry timers.
        Retries happen every *delay* seconds.

        Pending frames are keyed by their correlation reference. Only the
        frame at the head of the queue is ever transmitted; once it goes out
        the frames queued behind it are sent immediately, in order, until
        one fails or the queue is empty.
    """

    def __init__(self, session, delay=0.5):

        self.session = session
        self.delay = float(delay)
        self.pending = collections.OrderedDict()
        self.closed = False


    def __len__(self):
        return len(self.pending)


    def __contains__(self, ref):
        return ref in self.pending


    def enqueue(self, frame):
        """ Queue *frame* for delivery and try to send it now if nothing is
            queued ahead of it. Returns True if the frame was transmitted
            during this call.
        """

        if self.closed:
            raise RuntimeError('outbound queue is closed')

        if frame.ref in self.pending:
            raise ValueError('frame already queued: ref=' + repr(frame.ref))

        entry = Pending(frame)
        ahead = len(self.pending) > 0
        self.pending[frame.ref] = entry

        if ahead:
            self._arm(entry)
            return False

        self.flush()
        return frame.ref not in self.pending


    def flush(self):
        """ Transmit pending frames in order, stopping at the first one that
            cannot be sent. Returns True if the queue is now empty.
        """

        while self.pending:
            ref = next(iter(self.pending))
            entry = self.pending[ref]
            entry.attempts += 1

            try:
                self.session.transmit(entry.frame, entry.text)
            except NotOpenError as e:
                logger.debug('ref %s not sent (attempt %d): %s', ref, entry.attempts, e)
                self._rearm(entry)
                return False
            except Exception:
                # Keep the head armed whatever went wrong.
                self._rearm(entry)
                raise

            del self.pending[ref]

            if entry.timer is not None:
                entry.timer.cancel()
                entry.timer = None

        return True


    def close(self):
        """ Cancel every retry and return the frames that were never sent,
            in origination order. No further frames are accepted.
        """

        self.closed = True

        unsent = list()
        for entry in self.pending.values():
            if entry.timer is not None:
                entry.timer.cancel()
                entry.timer = None
            unsent.append(entry.frame)

        self.pending.clear()
        return unsent


    def _arm(self, entry):
        loop = self.session.loop
        entry.timer = loop.call_later(self.delay, self._retry, entry.frame.ref)


    def _rearm(self, entry):
        if entry.timer is None or not entry.timer.active:
            self._arm(entry)


    def _retry(self, ref):

        if self.closed:
            return

        try:
            entry = self.pending[ref]
        except KeyError:
            return

        entry.timer = None

        if next(iter(self.pending)) != ref:
            # Something older is still waiting; take turns behind it.
            self._arm(entry)
            return

        self.flush()


# end of class Outbound


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
