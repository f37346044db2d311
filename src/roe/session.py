""" The session state machine: open a socket, join the channel, keep it
    alive with heartbeats, and decide from each close code whether and when
    to reconnect. A :class:`Session` survives any number of transport
    failures; only :func:`Session.close` ends it.
"""

import enum
import functools
import itertools
import logging
import threading

from . import config
from .host import Host
from .loop import Loop, StoppedError
from .outbound import Outbound
from .protocol import fields
from .protocol import message
from .protocol.router import Router
from .transport.base import Listener, NotOpenError, TransportError
from .transport.websocket import WebSocketTransport

logger = logging.getLogger(__name__)


class State(enum.Enum):
    IDLE = 'idle'
    CONNECTING = 'connecting'
    JOINING = 'joining'
    JOINED = 'joined'
    RECONNECTING = 'reconnecting'
    CLOSING = 'closing'
    CLOSED = 'closed'


class JoinRejectedError(RuntimeError):
    """ The server answered the join request with an error status.

        :ivar topic: The topic that could not be joined.
        :ivar response: Whatever the server included as the reason, if
                        anything.
    """

    def __init__(self, topic, response=None):

        self.topic = topic
        self.response = response

        text = 'join rejected for ' + repr(topic)
        if response:
            text = text + ': ' + repr(response)

        RuntimeError.__init__(self, text)



def reconnect_delay(code, configuration=None):
    """ Return how many seconds to wait before reconnecting after a close
        notification with *code*, or None if no reconnect should happen.

        A client-initiated close never reconnects. An abnormal closure (the
        connection dropped without a close handshake) waits for the
        configured reconnect delay. Any other close, including an ordinary
        server-side close, reconnects immediately.
    """

    if configuration is None:
        configuration = config.get()

    if code == configuration.client_close_code:
        return None

    if code == configuration.abnormal_close_code:
        return configuration.reconnect_delay

    return 0.0



class Session(Listener):
    """ One logical conversation on one channel *topic*. The session owns
        exactly one transport handle at a time, replacing it on every
        reconnect; the topic and the correlation counter are kept for the
        lifetime of the session.

        The *host* receives callbacks (see :class:`roe.host.Host`); if no
        *topic* is given the host is asked for one. *handlers* maps event
        names to callables receiving the payload, in addition to any events
        the host lists in :attr:`Host.events`. The *transport* defaults to
        :class:`roe.transport.WebSocketTransport`, the *loop* to a new
        :class:`roe.loop.Loop` owned (and stopped) by this session.

        Every public method may be called from any thread; the work is
        posted to the loop.
    """

    def __init__(self, url=None, host=None, topic=None, handlers=None,
                 transport=None, loop=None, configuration=None):

        if configuration is None:
            configuration = config.get()

        if url is None:
            url = configuration.url

        if host is None:
            host = Host()

        if topic is None:
            topic = host.prompt_for_topic()

        if not isinstance(topic, str) or topic == '':
            raise ValueError('a session needs a non-empty topic, got ' + repr(topic))

        if transport is None:
            transport = WebSocketTransport()

        if loop is None:
            loop = Loop()
            self.owns_loop = True
        else:
            self.owns_loop = False

        self.url = url
        self.host = host
        self.loop = loop
        self.transport = transport
        self.configuration = configuration

        self.state = State.IDLE
        self.handle = None
        self.join_ref = None
        self.heartbeat_timer = None
        self.reconnect_timer = None
        self.awaiting = dict()

        self.joined = threading.Event()
        self.finished = threading.Event()

        self.counter = itertools.count(1)

        registrations = dict()
        for event in host.events:
            registrations[event] = functools.partial(host.on_application_event, event)

        if handlers:
            registrations.update(handlers)

        self.router = Router(topic, registrations, self._reply, self.counter)
        self.outbound = Outbound(self, configuration.retry_delay)


    def __repr__(self):
        return '<Session %s %s>' % (self.topic, self.state.value)


    @property
    def topic(self):
        return self.router.topic


    def label(self):
        """ Text describing the session, suitable for display by the host.
        """

        return '%s (%s)' % (self.topic, self.state.value)


    # Public interface. Safe from any thread.

    def start(self):
        """ Begin connecting. Calling this more than once has no effect.
        """

        self._post(self._start)


    def close(self):
        """ End the session: cancel every timer, close the socket with the
            client-initiated code, and report any unsent frames to the host.
        """

        self._post(self._close)


    def request_send(self, payload, event=None):
        """ Queue an application frame. The *event* defaults to the
            configured send event.
        """

        if self._post(self._request_send, payload, event):
            return

        # The loop is gone, so the session is closed for good.

        if event is None:
            event = self.configuration.send_event

        self._send_failed(self.router.encode(event, payload))


    def wait_ready(self, timeout=None):
        """ Block until the channel is joined. Returns False if *timeout*
            seconds pass first.
        """

        return self.joined.wait(timeout)


    def wait_closed(self, timeout=None):
        return self.finished.wait(timeout)


    # Transport notifications. These arrive on the transport's thread and
    # are handed to the loop; everything below them runs on the loop thread.

    def on_open(self, handle):
        self._post(self._opened, handle)


    def on_message(self, handle, text):
        self._post(self._message, handle, text)


    def on_error(self, handle, error):
        self._post(self._error, handle, error)


    def on_close(self, handle, code, reason):
        self._post(self._closed, handle, code, reason)


    def _post(self, method, *args):
        """ Hand *method* to the loop. Returns False if the loop has already
            been stopped, which only happens once this session is closed.
        """

        try:
            self.loop.call_soon(method, *args)
        except StoppedError:
            logger.debug('%s: loop stopped, dropped %s', self.topic, method.__name__)
            return False

        return True


    # Everything from here down runs on the loop thread.

    def transmit(self, frame, text=None):
        """ Send an application *frame* on the current handle. Raise
            :class:`NotOpenError` unless the channel is joined.
        """

        if self.state != State.JOINED or self.handle is None:
            raise NotOpenError('channel %s is %s' % (self.topic, self.state.value))

        if text is None:
            text = frame.encode()

        self.handle.send(text)
        self.awaiting[frame.ref] = frame


    def _set_state(self, state):

        previous = self.state
        if previous == state:
            return

        self.state = state
        logger.info('%s: %s -> %s', self.topic, previous.value, state.value)

        if state == State.JOINED:
            self.joined.set()
        else:
            self.joined.clear()

        try:
            self.host.render_session_label(self.label())
        except Exception:
            logger.exception('render_session_label raised')


    def _start(self):

        if self.state != State.IDLE:
            logger.debug('%s: start ignored, already %s', self.topic, self.state.value)
            return

        self._connect()


    def _connect(self):

        self.reconnect_timer = None

        if self.state in (State.CLOSING, State.CLOSED):
            return

        self._set_state(State.CONNECTING)
        self.join_ref = None
        self.awaiting.clear()

        logger.info('%s: connecting to %s', self.topic, self.url)
        self.handle = self.transport.connect(self.url, self)


    def _opened(self, handle):

        if handle is not self.handle or self.state != State.CONNECTING:
            return

        self._set_state(State.JOINING)

        frame = self.router.encode(fields.JOIN, dict())
        self.join_ref = frame.ref

        logger.debug('%s: sending join, ref=%s', self.topic, frame.ref)

        try:
            handle.send(frame.encode())
        except NotOpenError as e:
            # The close notification is on its way and will decide what
            # happens next.
            logger.warning('%s: join not sent: %s', self.topic, e)


    def _message(self, handle, text):

        if handle is not self.handle:
            return

        self.router.dispatch(text)


    def _error(self, handle, error):

        if handle is not self.handle:
            return

        if not isinstance(error, TransportError):
            error = TransportError(str(error))

        logger.warning('%s: transport error: %s', self.topic, error)


    def _closed(self, handle, code, reason):

        if handle is not self.handle:
            return

        self.handle = None
        self.join_ref = None
        self.awaiting.clear()
        self._stop_heartbeat()

        if self.state in (State.CLOSING, State.CLOSED):
            return

        logger.info('%s: connection closed, code=%s reason=%r', self.topic, code, reason)

        delay = reconnect_delay(code, self.configuration)

        if delay is None:
            self._finish()
            return

        self._set_state(State.RECONNECTING)
        logger.info('%s: reconnecting in %.1f seconds', self.topic, delay)
        self.reconnect_timer = self.loop.call_later(delay, self._connect)


    def _reply(self, frame):

        ref = frame.ref

        if ref is not None and ref == self.join_ref:
            self.join_ref = None

            if self.state != State.JOINING:
                return

            if frame.status == fields.OK:
                self._joined()
                return

            response = None
            if isinstance(frame.payload, dict):
                response = frame.payload.get('response')

            error = JoinRejectedError(self.topic, response)
            logger.warning('%s', error)

            try:
                self.host.on_join_rejected(error)
            except Exception:
                logger.exception('on_join_rejected raised')
            return

        try:
            sent = self.awaiting.pop(ref)
        except (KeyError, TypeError):
            logger.debug('%s: unmatched reply, ref=%r', self.topic, ref)
            return

        if frame.status != fields.OK:
            logger.warning('%s: %r rejected by server: %r', self.topic, sent.event, frame.payload)
            self._send_failed(sent)


    def _joined(self):

        self._set_state(State.JOINED)

        period = self.configuration.heartbeat
        self.heartbeat_timer = self.loop.call_every(period, self._heartbeat)

        try:
            self.outbound.flush()
        except Exception:
            logger.exception('%s: flushing queued frames raised', self.topic)

        try:
            self.host.on_ready()
        except Exception:
            logger.exception('on_ready raised')


    def _heartbeat(self):

        if self.state != State.JOINED or self.handle is None:
            return

        try:
            self.handle.send(message.heartbeat().encode())
        except NotOpenError as e:
            logger.warning('%s: heartbeat not sent: %s', self.topic, e)


    def _stop_heartbeat(self):

        if self.heartbeat_timer is not None:
            self.heartbeat_timer.cancel()
            self.heartbeat_timer = None


    def _request_send(self, payload, event):

        if event is None:
            event = self.configuration.send_event

        frame = self.router.encode(event, payload)

        if self.state in (State.CLOSING, State.CLOSED):
            self._send_failed(frame)
            return

        self.outbound.enqueue(frame)


    def _send_failed(self, frame):

        try:
            self.host.on_send_failed(frame)
        except Exception:
            logger.exception('on_send_failed raised')


    def _close(self):

        if self.state in (State.CLOSING, State.CLOSED):
            return

        self._set_state(State.CLOSING)

        handle = self.handle
        self.handle = None

        if handle is not None:
            code = self.configuration.client_close_code
            reason = self.configuration.client_close_reason

            try:
                handle.close(code, reason)
            except TransportError as e:
                logger.warning('%s: error closing socket: %s', self.topic, e)

        self._finish()


    def _finish(self):
        """ Final teardown: nothing scheduled before this point can send or
            reconnect afterward.
        """

        self._stop_heartbeat()

        if self.reconnect_timer is not None:
            self.reconnect_timer.cancel()
            self.reconnect_timer = None

        self.join_ref = None
        self.awaiting.clear()
        unsent = self.outbound.close()

        self._set_state(State.CLOSED)

        for frame in unsent:
            self._send_failed(frame)

        self.finished.set()

        if self.owns_loop:
            self.loop.stop()


# end of class Session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
