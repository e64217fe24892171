# -*- coding: utf-8 -*-

import pytest

from settle.promise import EventLoop, set_loop


class VirtualClock(object):
    """Time source for the loop. Sleeping advances the time instantly."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, delay):
        self.now += delay


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture(autouse=True)
def loop(request, clock):
    """Each test runs on its own loop, using a virtual clock."""
    event_loop = EventLoop(clock=clock, sleep=clock.sleep)
    set_loop(event_loop)
    request.addfinalizer(lambda: set_loop(None))
    return event_loop
