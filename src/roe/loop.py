""" A single dispatch thread that serializes every session callback. Transport
    notifications arrive on whatever thread the transport library uses; they
    are handed to :func:`Loop.call_soon`, and the session logic only ever
    runs on the loop thread. Timers (heartbeats, reconnect delays, send
    retries) are kept in a heap and fired from the same thread.
"""

import heapq
import itertools
import logging
import queue
import threading
import time

logger = logging.getLogger(__name__)


class StoppedError(RuntimeError):
    """ A call was posted to a :class:`Loop` that has already been stopped.
    """



class Timer:
    """ Handle for a call scheduled via :func:`Loop.call_later` or
        :func:`Loop.call_every`. The only thing a caller is expected to do
        with it is :func:`cancel`.
    """

    def __init__(self, deadline, interval, method, args):

        self.deadline = deadline
        self.interval = interval
        self.method = method
        self.args = args
        self.cancelled = False
        self.expired = False


    @property
    def active(self):
        return not (self.cancelled or self.expired)


    def cancel(self):
        self.cancelled = True


# end of class Timer



class Loop:
    """ Cooperative event loop. Calls posted with :func:`call_soon` and timer
        callbacks all run on one thread, one at a time, so the code they
        invoke does not need any locking of its own.

        The *clock* argument is a zero-argument callable returning seconds;
        it defaults to :func:`time.monotonic`. If *start* is False no
        background thread is created, and the owner is expected to drive the
        loop by calling :func:`run_once` or :func:`run_pending`.
    """

    def __init__(self, clock=None, start=True):

        if clock is None:
            clock = time.monotonic

        self.clock = clock
        self.queue = queue.SimpleQueue()
        self.shutdown = False
        self.shutdown_lock = threading.Lock()
        self.thread = None

        self.timers = list()
        self.timers_lock = threading.Lock()
        self.sequence = itertools.count()

        if start:
            self.start()


    def start(self):

        if self.thread is not None:
            return

        self.thread = threading.Thread(target=self.run, name='roe.loop')
        self.thread.daemon = True
        self.thread.start()


    def stop(self):
        """ Stop accepting new calls. Calls already posted still run before
            the loop thread exits.
        """

        self.shutdown_lock.acquire()
        try:
            self.shutdown = True
        finally:
            self.shutdown_lock.release()

        self.wake()


    def time(self):
        return self.clock()


    def wake(self):
        self.queue.put(None)


    def call_soon(self, method, *args):
        """ Run *method* with *args* on the loop thread as soon as possible.
            Safe to call from any thread. Raise :class:`StoppedError` if
            the loop has been stopped.
        """

        self.shutdown_lock.acquire()
        try:
            if self.shutdown:
                raise StoppedError('loop is stopped, cannot run ' + repr(method))

            self.queue.put((method, args))
        finally:
            self.shutdown_lock.release()


    def call_later(self, delay, method, *args):
        """ Run *method* once, *delay* seconds from now. A *delay* of zero
            runs it on the next pass through the loop.
        """

        delay = float(delay)
        if delay < 0:
            raise ValueError('delay must be non-negative: ' + repr(delay))

        timer = Timer(self.time() + delay, None, method, args)
        self._schedule(timer)
        return timer


    def call_every(self, period, method, *args):
        """ Run *method* every *period* seconds until the returned
            :class:`Timer` is cancelled. The first call occurs one full
            *period* from now.
        """

        period = float(period)
        if period <= 0:
            raise ValueError('period must be positive: ' + repr(period))

        timer = Timer(self.time() + period, period, method, args)
        self._schedule(timer)
        return timer


    def next_delay(self):
        """ Return the number of seconds until the next active timer is due,
            or None if there are no active timers.
        """

        self.timers_lock.acquire()
        try:
            while self.timers and self.timers[0][2].cancelled:
                heapq.heappop(self.timers)

            if len(self.timers) == 0:
                return None

            deadline = self.timers[0][0]
        finally:
            self.timers_lock.release()

        delay = deadline - self.time()
        if delay < 0:
            delay = 0

        return delay


    def run(self):

        while self.shutdown == False:
            self.run_once(self.next_delay())

        # Nothing can be posted once shutdown is set; drain what was.
        while not self.queue.empty():
            self.run_once()


    def run_once(self, timeout=0):
        """ Wait up to *timeout* seconds for a posted call (forever if
            *timeout* is None, not at all if it is zero), then run every
            posted call and every timer that has come due.
        """

        calls = list()

        try:
            if timeout == 0:
                item = self.queue.get_nowait()
            else:
                item = self.queue.get(timeout=timeout)
        except queue.Empty:
            item = None

        while True:
            if item is not None:
                calls.append(item)

            try:
                item = self.queue.get_nowait()
            except queue.Empty:
                break

        for method, args in calls:
            self._invoke(method, args)

        self.run_timers()


    def run_pending(self):
        """ Run everything that is runnable right now without blocking,
            including calls posted by the calls being run.
        """

        while True:
            self.run_once()

            if not self.queue.empty():
                continue

            delay = self.next_delay()
            if delay is not None and delay <= 0:
                continue

            break


    def run_timers(self):

        now = self.time()

        while True:
            self.timers_lock.acquire()
            try:
                if len(self.timers) == 0:
                    break

                deadline, sequence, timer = self.timers[0]

                if timer.cancelled:
                    heapq.heappop(self.timers)
                    continue

                if deadline > now:
                    break

                heapq.heappop(self.timers)
            finally:
                self.timers_lock.release()

            if timer.interval is None:
                timer.expired = True
            else:
                # Keep the cadence anchored to the original schedule, the
                # same way a poller increments its previous wakeup rather
                # than the time it actually woke up. Ticks that were missed
                # entirely are skipped, not replayed.

                deadline += timer.interval
                while deadline <= now:
                    deadline += timer.interval

                timer.deadline = deadline
                self._schedule(timer, wake=False)

            self._invoke(timer.method, timer.args)


    def _invoke(self, method, args):

        try:
            method(*args)
        except Exception:
            logger.exception('exception in loop callback %r', method)


    def _schedule(self, timer, wake=True):

        self.timers_lock.acquire()
        try:
            entry = (timer.deadline, next(self.sequence), timer)
            heapq.heappush(self.timers, entry)
        finally:
            self.timers_lock.release()

        if wake:
            self.wake()


# end of class Loop


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
