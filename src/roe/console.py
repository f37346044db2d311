""" A terminal host: asks for a character on stdin, prints incoming message
    bodies, and sends each typed line as a message. This is the command line
    counterpart of the original page bookmarklet.
"""

import sys

from . import config
from .host import Host


class ConsoleHost(Host):
    """ :class:`roe.host.Host` that talks to a pair of text streams. The
        configuration determines the default character, the topic suffix,
        and which event carries incoming content.
    """

    def __init__(self, configuration=None, stdin=None, stdout=None, stderr=None):

        if configuration is None:
            configuration = config.get()

        self.configuration = configuration
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

        self.events = (configuration.receive_event,)


    def prompt_for_topic(self):

        default = self.configuration.default_character
        self.stderr.write('Choose a character [%s]: ' % (default))
        self.stderr.flush()

        character = self.stdin.readline().strip()
        if character == '':
            character = default

        return character + self.configuration.topic_suffix


    def render_session_label(self, text):
        self.stderr.write('[%s]\n' % (text))
        self.stderr.flush()


    def on_ready(self):
        self.stderr.write('Joined successfully to the channel\n')
        self.stderr.flush()


    def on_application_event(self, event, payload):

        try:
            body = payload['body']
        except (KeyError, TypeError):
            body = payload

        self.stdout.write('%s\n' % (body,))
        self.stdout.flush()


    def on_send_failed(self, frame):
        self.stderr.write('not delivered: %r\n' % (frame.payload,))
        self.stderr.flush()


    def on_join_rejected(self, error):
        self.stderr.write('%s\n' % (error,))
        self.stderr.flush()


# end of class ConsoleHost



def relay(session, stream):
    """ Send every non-empty line read from *stream* as ``{"body": line}``.
        Returns when the stream is exhausted.
    """

    for line in stream:
        line = line.rstrip('\r\n')
        if line == '':
            continue

        payload = dict()
        payload['body'] = line
        session.request_send(payload)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
