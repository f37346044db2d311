""" Session configuration: connection endpoint, timer periods, close codes
    and event names. Built-in defaults can be overridden by a JSON file in
    the configuration directory, and the endpoint by the ``ROE_URL``
    environment variable.
"""

import os
import threading

from . import json
from .protocol import fields


_cache = dict()
_cache_lock = threading.Lock()

filename = 'session.json'

defaults = dict()
defaults['url'] = 'wss://abandoned-scared-halibut.gigalixirapp.com/socket/websocket'
defaults['topic_suffix'] = ':lobby'
defaults['default_character'] = 'whip'
defaults['heartbeat'] = 30.0
defaults['reconnect_delay'] = 3.0
defaults['retry_delay'] = 0.5
defaults['client_close_code'] = fields.CLIENT_CLOSE
defaults['client_close_reason'] = 'Switching to new connection'
defaults['abnormal_close_code'] = fields.ABNORMAL_CLOSE
defaults['receive_event'] = 'message:new'
defaults['send_event'] = 'message:send'


class Configuration:
    """ A convenience class to represent session configuration. Values are
        available either as attributes or by key; every key must be one of
        the keys in :data:`defaults`.
    """

    def __init__(self, values=None, **kwargs):

        self._values = dict(defaults)

        if values is not None:
            self.update(values)

        if kwargs:
            self.update(kwargs)


    def __contains__(self, key):
        return key in self._values


    def __getattr__(self, name):

        # Only reached for names that are not regular attributes.

        if name.startswith('_'):
            raise AttributeError(name)

        try:
            return self._values[name]
        except KeyError:
            raise AttributeError('no such configuration value: ' + name)


    def __getitem__(self, key):
        return self._values[key]


    def __repr__(self):
        return 'Configuration(%r)' % (self._values,)


    def copy(self, **kwargs):
        """ Return a new :class:`Configuration` with the same values, apart
            from any overrides in *kwargs*.
        """

        return Configuration(self._values, **kwargs)


    def load(self, path):
        """ Update this configuration from the JSON file at *path*.
        """

        file = open(path, 'rb')
        try:
            contents = file.read()
        finally:
            file.close()

        loaded = json.loads(contents)

        if not isinstance(loaded, dict):
            raise ValueError('configuration file must contain a JSON object: ' + path)

        self.update(loaded)


    def update(self, values):

        for key, value in values.items():
            if key not in defaults:
                raise KeyError('unknown configuration key: ' + repr(key))

            expected = type(defaults[key])

            if expected is float and isinstance(value, int):
                value = float(value)

            if not isinstance(value, expected):
                raise TypeError("configuration key '%s' expects %s, got %r" % (key, expected.__name__, value))

            self._values[key] = value


# end of class Configuration



def directory():
    """ Return the directory location where configuration files are loaded
        from. This defaults to ``$HOME/.roe``, but can be overridden by
        setting the ``ROE_HOME`` environment variable.
    """

    try:
        found = os.environ['ROE_HOME']
    except KeyError:
        pass
    else:
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('ROE_HOME and HOME environment variables not set, cannot determine configuration directory')

    return os.path.join(home, '.roe')



def get(reload=False):
    """ Return the cached :class:`Configuration`, creating it on first use.
        The configuration file, if present, is applied on top of the
        defaults, and ``ROE_URL`` is applied on top of that.
    """

    _cache_lock.acquire()
    try:
        if reload == False:
            try:
                return _cache['default']
            except KeyError:
                pass

        configuration = Configuration()

        path = os.path.join(directory(), filename)
        if os.path.exists(path):
            configuration.load(path)

        try:
            url = os.environ['ROE_URL']
        except KeyError:
            pass
        else:
            configuration.update(dict(url=url))

        _cache['default'] = configuration
    finally:
        _cache_lock.release()

    return configuration


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
