""" Implementation of the top-level :func:`connect` method. This is intended
    to be the principal entry point for hosts that want a running session
    with a single call.
"""

import threading

from . import config
from .session import Session


_cache = dict()
_cache_lock = threading.Lock()


def _clear(url):
    """ Forget the cached :class:`Session` for *url*. Returns None if there
        was no such session; otherwise the session is returned, largely to
        allow the caller to close it.
    """

    try:
        existing = _cache[url]
    except KeyError:
        return

    del _cache[url]
    return existing



def connect(host=None, topic=None, url=None, **kwargs):
    """ Start and return a new :class:`Session`. Any additional keyword
        arguments are passed to the :class:`Session` constructor.

        Only one session per *url* is kept here: if an earlier session for
        the same endpoint was started via :func:`connect`, it is closed
        first, with the client-initiated close code, so it will not try to
        reconnect. Sessions constructed directly are not affected.
    """

    configuration = kwargs.get('configuration')
    if configuration is None:
        configuration = config.get()
        kwargs['configuration'] = configuration

    if url is None:
        url = configuration.url

    _cache_lock.acquire()
    try:
        previous = _clear(url)
    finally:
        _cache_lock.release()

    if previous is not None:
        previous.close()

    session = Session(url, host, topic, **kwargs)

    _cache_lock.acquire()
    try:
        _cache[url] = session
    finally:
        _cache_lock.release()

    session.start()
    return session



def current(url=None):
    """ Return the session most recently started via :func:`connect` for
        *url*, or None.
    """

    if url is None:
        url = config.get().url

    return _cache.get(url)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
