import json
import os

import pytest

import roe


def test_defaults():

    configuration = roe.config.Configuration()

    assert configuration.heartbeat == 30.0
    assert configuration.reconnect_delay == 3.0
    assert configuration.retry_delay == 0.5
    assert configuration.client_close_code == 3001
    assert configuration.abnormal_close_code == 1006
    assert configuration['topic_suffix'] == ':lobby'
    assert configuration.url.startswith('wss://')


def test_overrides():

    configuration = roe.config.Configuration(heartbeat=10, url='ws://localhost:4000/socket/websocket')
    assert configuration.heartbeat == 10.0
    assert isinstance(configuration.heartbeat, float)
    assert configuration.url == 'ws://localhost:4000/socket/websocket'

    copied = configuration.copy(heartbeat=5)
    assert copied.heartbeat == 5.0
    assert copied.url == configuration.url
    assert configuration.heartbeat == 10.0


def test_bad_values():

    with pytest.raises(KeyError):
        roe.config.Configuration(no_such_key=1)

    with pytest.raises(TypeError):
        roe.config.Configuration(heartbeat='often')

    with pytest.raises(AttributeError):
        roe.config.Configuration().no_such_key


def test_directory(monkeypatch, tmp_path):

    monkeypatch.setenv('ROE_HOME', str(tmp_path))
    assert roe.config.directory() == str(tmp_path)

    monkeypatch.delenv('ROE_HOME')
    monkeypatch.setenv('HOME', str(tmp_path))
    assert roe.config.directory() == os.path.join(str(tmp_path), '.roe')


def test_get(monkeypatch, tmp_path):

    settings = dict(heartbeat=15, send_event='content:send')
    with open(os.path.join(str(tmp_path), 'session.json'), 'w') as file:
        json.dump(settings, file)

    monkeypatch.setenv('ROE_HOME', str(tmp_path))
    monkeypatch.setenv('ROE_URL', 'ws://localhost:4000/socket/websocket')

    configuration = roe.config.get(reload=True)
    assert configuration.heartbeat == 15.0
    assert configuration.send_event == 'content:send'
    assert configuration.url == 'ws://localhost:4000/socket/websocket'
    assert configuration.reconnect_delay == 3.0

    assert roe.config.get() is configuration

    monkeypatch.delenv('ROE_URL')
    os.remove(os.path.join(str(tmp_path), 'session.json'))
    configuration = roe.config.get(reload=True)
    assert configuration.heartbeat == 30.0


def test_load_rejects_non_object(tmp_path):

    path = os.path.join(str(tmp_path), 'session.json')
    with open(path, 'w') as file:
        file.write('[1, 2, 3]')

    with pytest.raises(ValueError):
        roe.config.Configuration().load(path)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
