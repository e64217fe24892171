# -*- coding: utf-8 -*-

from .decorators import wrap_promise
from .deferred import Deferred
from .errors import RejectionError, TimeoutError
from .loop import EventLoop, get_loop, schedule, set_loop
from .promise import Promise
from .reduce_coroutine import reduce_coroutine

__all__ = ['Deferred', 'EventLoop', 'Promise', 'RejectionError',
           'TimeoutError', 'get_loop', 'reduce_coroutine', 'schedule',
           'set_loop', 'wrap_promise']
