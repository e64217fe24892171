# -*- coding: utf-8 -*-

"""Single-threaded scheduler used to deliver the Promise notifications.

The loop owns two queues:
- the "ready" queue, a FIFO of callbacks to execute as soon as possible.
- the timer queue, ordered by due time, of callbacks delayed by
  ``call_later()``.

A "turn" executes all callbacks present in the ready queue when the turn
starts. Callbacks added during a turn are executed by the next one.

Nothing runs in the background: the loop advances only when one of the
``run*()`` methods is called, usually indirectly by ``Promise.result()``.
"""

from collections import deque
import heapq
import itertools
import logging
import time

_logger = logging.getLogger(__name__)


class EventLoop(object):
    """Cooperative scheduler executing callbacks one turn after another.

    Example:

        >>> loop = EventLoop()
        >>> loop.call_later(0.01, print, 'second')
        >>> loop.call_soon(print, 'first')
        >>> loop.run()
        first
        second
    """

    def __init__(self, clock=time.monotonic, sleep=time.sleep):
        """Constructor

        Args:
            clock (callable, optional): returns the current time, in seconds.
            sleep (callable, optional): blocks for the given delay, in
                seconds. Called only when there is nothing else to do.
        """
        self._clock = clock
        self._sleep = sleep
        self._ready = deque()
        self._timers = []
        self._counter = itertools.count()

    def time(self):
        """Returns the current time of the loop, in seconds."""
        return self._clock()

    def call_soon(self, callback, *args):
        """Schedule the callback for the next turn.

        Callbacks are executed in the order they have been added.
        """
        self._ready.append((callback, args))

    def call_later(self, delay, callback, *args):
        """Schedule the callback to be executed after a delay.

        The callback is executed once, no earlier than `delay` seconds after
        this call. Callbacks with the same due time are executed in the order
        they have been scheduled.

        Args:
            delay (float): delay in seconds. Negative values are treated as 0.
            callback (callable)
            *args: arguments passed to the callback.
        """
        when = self._clock() + max(delay, 0)
        heapq.heappush(self._timers,
                       (when, next(self._counter), callback, args))

    def has_pending_work(self):
        """Returns True if at least one callback is waiting to be executed."""
        return bool(self._ready or self._timers)

    def run_once(self):
        """Execute one turn of the loop.

        The timers whose delay has expired are moved to the ready queue, then
        the callbacks present in the ready queue are executed.

        Returns:
            int: number of callbacks executed.
        """
        now = self._clock()
        while self._timers and self._timers[0][0] <= now:
            _when, _seq, callback, args = heapq.heappop(self._timers)
            self._ready.append((callback, args))

        nb_callbacks = len(self._ready)
        for _ in range(nb_callbacks):
            callback, args = self._ready.popleft()
            self._exec_callback(callback, args)
        return nb_callbacks

    def run_until(self, predicate, timeout=None):
        """Run the loop until a condition is met.

        The loop stops as soon as one of these events occurs:
        - `predicate()` returns True.
        - the timeout has expired.
        - there is no more callback to execute, so nothing can change.

        When only delayed callbacks remain, the loop sleeps until the next one
        is due (or until the timeout).

        Args:
            predicate (callable): condition checked between each turn.
            timeout (float, optional): maximum time to run, in seconds. By
                default, there is no time limit.
        Returns:
            bool: the last value returned by `predicate()`.
        """
        deadline = None if timeout is None else self._clock() + timeout

        while not predicate():
            if self._ready:
                self.run_once()
                continue
            if not self._timers:
                break

            now = self._clock()
            next_when = self._timers[0][0]
            if deadline is not None and next_when > deadline:
                if deadline > now:
                    self._sleep(deadline - now)
                break
            if next_when > now:
                self._sleep(next_when - now)
            self.run_once()

        return predicate()

    def run(self):
        """Run the loop until there is no more callback to execute."""
        self.run_until(lambda: not self.has_pending_work())

    @staticmethod
    def _exec_callback(callback, args):
        try:
            callback(*args)
        except Exception:
            _logger.exception('Callback %s raised an exception!',
                              getattr(callback, '__name__', repr(callback)))


_default_loop = None


def get_loop():
    """Returns the default loop, created at the first call."""
    global _default_loop

    if _default_loop is None:
        _default_loop = EventLoop()
    return _default_loop


def set_loop(loop):
    """Replace the default loop.

    Args:
        loop (EventLoop): new default loop. If None, a new one will be
            created at the next call to ``get_loop()``.
    """
    global _default_loop
    _default_loop = loop


def schedule(callback, delay_ms):
    """Execute a callback once, after a delay, on the default loop.

    Args:
        callback (callable): function called without argument.
        delay_ms (int): delay in milliseconds.
    """
    get_loop().call_later(delay_ms / 1000.0, callback)
