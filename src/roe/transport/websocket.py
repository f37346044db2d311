""" WebSocket transport backed by the websocket-client library. Each
    :class:`WebSocketHandle` runs its own :class:`websocket.WebSocketApp`
    on a daemon thread; notifications are passed straight through to the
    listener, which is expected to hand them off to the session loop.
"""

import logging
import threading

import websocket

from ..protocol import fields
from .base import Handle, NotOpenError, Transport

logger = logging.getLogger(__name__)


class WebSocketHandle(Handle):
    """ A single WebSocket connection. The close notification is guaranteed
        to be emitted exactly once, whether the library reports the closure
        itself or :func:`websocket.WebSocketApp.run_forever` simply returns.
    """

    def __init__(self, url, listener, options=None):

        if options is None:
            options = dict()

        self.url = url
        self.listener = listener
        self.options = options

        self._open = False
        self._closed = False
        self._close_request = None
        self._lock = threading.Lock()

        self.app = websocket.WebSocketApp(url,
                                          on_open=self._on_open,
                                          on_message=self._on_message,
                                          on_error=self._on_error,
                                          on_close=self._on_close)

        self.thread = threading.Thread(target=self.run, name='roe.websocket')
        self.thread.daemon = True


    @property
    def is_open(self):
        return self._open


    def start(self):
        self.thread.start()


    def run(self):

        try:
            self.app.run_forever(**self.options)
        except Exception as e:
            self.listener.on_error(self, e)
        finally:
            # A connection that never opened, or that the library tore down
            # without invoking on_close, still owes the listener a close.
            self._notify_close(None, None)


    def send(self, text):

        if not self._open:
            raise NotOpenError('socket is not open: ' + self.url)

        try:
            self.app.send(text)
        except (websocket.WebSocketException, OSError) as e:
            raise NotOpenError(str(e))


    def close(self, code=fields.CLIENT_CLOSE, reason=''):

        self._close_request = (code, reason)
        self._open = False

        try:
            # Send the close frame without waiting for the server's answer;
            # this runs on the session loop thread.
            self.app.close(status=code, reason=reason.encode(), timeout=0)
        except (websocket.WebSocketException, OSError) as e:
            logger.debug('error while closing %s: %s', self.url, e)


    def _on_open(self, app):
        self._open = True
        self.listener.on_open(self)


    def _on_message(self, app, message):
        self.listener.on_message(self, message)


    def _on_error(self, app, error):
        self.listener.on_error(self, error)


    def _on_close(self, app, code, reason):
        self._notify_close(code, reason)


    def _notify_close(self, code, reason):

        self._lock.acquire()
        try:
            if self._closed:
                return
            self._closed = True
            self._open = False
        finally:
            self._lock.release()

        # A locally requested close reports the code that was asked for.
        # The library reports no status at all when the connection dropped
        # without a closing handshake; that is the abnormal closure case.

        if self._close_request is not None:
            code, reason = self._close_request
        elif code is None:
            code = fields.ABNORMAL_CLOSE

        if reason is None:
            reason = ''
        elif isinstance(reason, bytes):
            reason = reason.decode(errors='replace')

        self.listener.on_close(self, code, reason)


# end of class WebSocketHandle



class WebSocketTransport(Transport):
    """ Produce :class:`WebSocketHandle` instances. Any keyword arguments
        are passed through to :func:`websocket.WebSocketApp.run_forever`,
        for example *sslopt* or *ping_interval*.
    """

    def __init__(self, **options):
        self.options = options


    def connect(self, url, listener):

        handle = WebSocketHandle(url, listener, dict(self.options))
        handle.start()
        return handle


# end of class WebSocketTransport


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
