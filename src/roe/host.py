""" The host is whatever application embeds a session: it supplies the
    topic, displays the session label, and receives application events.
    :class:`Host` implements every callback as a no-op; subclass it and
    override what matters.
"""


class Host:
    """ Callbacks the session invokes. All of them run on the session loop
        thread and should return promptly; work that takes time (reading a
        clipboard, waiting on a user) should be started here and finished
        later with :func:`roe.session.Session.request_send`, which may be
        called from any thread.

        :ivar events: Event names that should be routed to
                      :func:`on_application_event`.
    """

    events = ()

    def prompt_for_topic(self):
        """ Return the topic to join. Only called if the session was not
            given a topic explicitly.
        """

        raise NotImplementedError('this host cannot choose a topic')


    def render_session_label(self, text):
        pass


    def on_ready(self):
        pass


    def on_application_event(self, event, payload):
        pass


    def on_send_failed(self, frame):
        pass


    def on_join_rejected(self, error):
        pass


# end of class Host


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
