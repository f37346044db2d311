import pytest

import roe


TOPIC = 'whip:lobby'
URL = 'wss://example.invalid/socket/websocket'


class ManualLoop(roe.loop.Loop):
    """ A :class:`roe.loop.Loop` with no thread, whose clock only moves
        when a test calls :func:`advance`.
    """

    def __init__(self):
        self.now = 0.0
        roe.loop.Loop.__init__(self, clock=self.current, start=False)


    def current(self):
        return self.now


    def advance(self, seconds):
        """ Move the clock forward *seconds*, stopping at every timer
            deadline along the way so timers fire at their exact time.
        """

        target = self.now + seconds
        self.run_pending()

        while True:
            if self.next_delay() is None:
                break

            deadline = self.timers[0][0]
            if deadline > target:
                break

            if deadline > self.now:
                self.now = deadline
            self.run_pending()

        self.now = target
        self.run_pending()



class FakeHandle(roe.transport.Handle):
    """ In-memory socket. The test drives the remote side with :func:`open`,
        :func:`receive`, :func:`reply` and :func:`drop`; each of those runs
        the loop afterward so the session has reacted by the time they
        return.
    """

    def __init__(self, loop, url, listener):
        self.loop = loop
        self.url = url
        self.listener = listener
        self.sent = list()
        self.opened = False
        self.closed = None


    @property
    def is_open(self):
        return self.opened and self.closed is None


    def send(self, text):
        if not self.is_open:
            raise roe.NotOpenError('fake socket is not open')
        self.sent.append(text)


    def close(self, code, reason=''):
        if self.closed is not None:
            return
        self.closed = (code, reason)
        self.listener.on_close(self, code, reason)


    def frames(self):
        return [roe.json.loads(text) for text in self.sent]


    def events(self):
        return [frame['event'] for frame in self.frames()]


    def open(self):
        self.opened = True
        self.listener.on_open(self)
        self.loop.run_pending()


    def receive(self, frame):
        if isinstance(frame, dict):
            frame = roe.json.dumps(frame).decode()
        self.listener.on_message(self, frame)
        self.loop.run_pending()


    def reply(self, ref, status='ok', topic=TOPIC, response=None):
        payload = dict(status=status)
        if response is not None:
            payload['response'] = response

        frame = dict(topic=topic, event='phx_reply', payload=payload, ref=ref)
        self.receive(frame)


    def error(self, error):
        self.listener.on_error(self, error)
        self.loop.run_pending()


    def drop(self, code=1006, reason=''):
        self.closed = (code, reason)
        self.listener.on_close(self, code, reason)
        self.loop.run_pending()



class FakeTransport(roe.transport.Transport):

    def __init__(self, loop):
        self.loop = loop
        self.handles = list()


    def connect(self, url, listener):
        handle = FakeHandle(self.loop, url, listener)
        self.handles.append(handle)
        return handle


    @property
    def latest(self):
        return self.handles[-1]



class RecordingHost(roe.Host):

    events = ('message:new',)

    def __init__(self):
        self.ready = 0
        self.received = list()
        self.failed = list()
        self.rejected = list()
        self.labels = list()


    def prompt_for_topic(self):
        return TOPIC


    def render_session_label(self, text):
        self.labels.append(text)


    def on_ready(self):
        self.ready += 1


    def on_application_event(self, event, payload):
        self.received.append((event, payload))


    def on_send_failed(self, frame):
        self.failed.append(frame)


    def on_join_rejected(self, error):
        self.rejected.append(error)



@pytest.fixture
def loop():
    return ManualLoop()


@pytest.fixture
def transport(loop):
    return FakeTransport(loop)


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def configuration():
    return roe.config.Configuration()


@pytest.fixture
def session(loop, transport, host, configuration):
    return roe.Session(URL, host, TOPIC, transport=transport, loop=loop, configuration=configuration)


@pytest.fixture
def joined(session, loop, transport):
    """ A session that has connected and completed its join handshake.
    """

    session.start()
    loop.run_pending()

    handle = transport.latest
    handle.open()
    handle.reply(handle.frames()[0]['ref'])

    assert session.state == roe.State.JOINED
    return session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
