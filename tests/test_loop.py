import threading
import time

import pytest

import roe


def test_call_soon_order(loop):

    calls = list()
    loop.call_soon(calls.append, 1)
    loop.call_soon(calls.append, 2)
    loop.call_soon(calls.append, 3)

    assert calls == []
    loop.run_pending()
    assert calls == [1, 2, 3]


def test_call_later(loop):

    calls = list()
    loop.call_later(2, calls.append, 'late')
    loop.call_later(1, calls.append, 'early')

    loop.advance(0.5)
    assert calls == []

    loop.advance(0.5)
    assert calls == ['early']

    loop.advance(1)
    assert calls == ['early', 'late']

    loop.advance(10)
    assert calls == ['early', 'late']


def test_call_later_zero(loop):

    calls = list()
    timer = loop.call_later(0, calls.append, 'now')
    loop.run_pending()

    assert calls == ['now']
    assert timer.active == False


def test_negative_delay(loop):

    with pytest.raises(ValueError):
        loop.call_later(-1, print)

    with pytest.raises(ValueError):
        loop.call_every(0, print)


def test_cancel(loop):

    calls = list()
    timer = loop.call_later(1, calls.append, 'cancelled')
    assert timer.active == True

    timer.cancel()
    assert timer.active == False

    loop.advance(5)
    assert calls == []
    assert loop.next_delay() is None


def test_call_every(loop):

    ticks = list()

    def tick():
        ticks.append(loop.time())

    timer = loop.call_every(0.5, tick)

    loop.advance(2)
    assert ticks == [0.5, 1.0, 1.5, 2.0]

    timer.cancel()
    loop.advance(2)
    assert len(ticks) == 4


def test_call_every_cancel_from_callback(loop):

    ticks = list()

    def tick():
        ticks.append(loop.time())
        if len(ticks) == 2:
            timer.cancel()

    timer = loop.call_every(1, tick)
    loop.advance(10)

    assert ticks == [1.0, 2.0]


def test_exception_does_not_stop_loop(loop, caplog):

    calls = list()

    def broken():
        raise RuntimeError('broken callback')

    loop.call_soon(broken)
    loop.call_soon(calls.append, 'after')
    loop.run_pending()

    assert calls == ['after']
    assert 'broken callback' in caplog.text


def test_threaded():
    """ The default loop runs on its own thread with the real clock.
    """

    loop = roe.loop.Loop()
    done = threading.Event()
    threads = list()

    def record():
        threads.append(threading.current_thread())
        done.set()

    start = time.monotonic()
    loop.call_later(0.05, record)

    assert done.wait(2) == True
    assert time.monotonic() - start >= 0.05
    assert threads == [loop.thread]

    loop.stop()
    loop.thread.join(2)
    assert loop.thread.is_alive() == False


def test_threaded_call_soon():

    loop = roe.loop.Loop()
    done = threading.Event()

    loop.call_soon(done.set)
    assert done.wait(2) == True

    loop.stop()


def test_stop_drains_posted_calls():

    loop = roe.loop.Loop(start=False)
    calls = list()

    loop.call_soon(calls.append, 1)
    loop.stop()

    with pytest.raises(roe.loop.StoppedError):
        loop.call_soon(calls.append, 2)

    loop.run()
    assert calls == [1]


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
