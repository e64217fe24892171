# -*- coding: utf-8 -*-

"""Example producer of Promises: greetings delivered after a delay."""

from functools import partial
import logging

from .promise import Deferred, Promise, schedule, wrap_promise

_logger = logging.getLogger(__name__)

# Delays are in milliseconds.
DEFAULT_DELAY = 1500
MAX_DELAY = 1500


@wrap_promise
def generate_greeting(name, delay_ms=DEFAULT_DELAY):
    """Greet someone, asynchronously.

    Args:
        name (str): name of the person to greet.
        delay_ms (int, optional): delay before the greeting, in milliseconds.
            Must be between 0 and MAX_DELAY.
    Returns:
        Promise<str>: fulfilled with 'Hello <name>!' once the delay has
            elapsed. If the delay is invalid, the Promise is rejected at once
            with a ValueError.
    """
    if not 0 <= delay_ms <= MAX_DELAY:
        raise ValueError('Invalid delay!')
    df = Deferred(_name='GREETING %s' % name)
    schedule(partial(df.resolve, 'Hello %s!' % name), delay_ms)
    return df.promise


def run_demo(delay_ms=DEFAULT_DELAY):
    """Use each kind of Promise combination on greetings, and log results.

    Args:
        delay_ms (int, optional): delay used for the slowest greetings.
    """
    if not 0 <= delay_ms <= MAX_DELAY:
        _logger.warning('Invalid greeting delay: %s ms. Default delay will '
                        'be used.', delay_ms)
        delay_ms = DEFAULT_DELAY
    fast_delay = min(100, delay_ms)

    greeting = generate_greeting('Sean', delay_ms)
    _logger.info('Single greeting: %s', greeting.result())

    greetings = Promise.all([generate_greeting('Sean', delay_ms),
                             generate_greeting('Beth', delay_ms)])
    _logger.info('All greetings: %s', greetings.result())

    fastest = Promise.race([generate_greeting('Sean', fast_delay),
                            generate_greeting('Beth', delay_ms)])
    _logger.info('Fastest greeting: %s', fastest.result())

    _logger.info('Resolved: %s', Promise.resolve('Say Hello!').result())

    error = Promise.reject(ValueError('Help! Error!')).exception()
    _logger.info('Rejected: %r', error)

    error = generate_greeting('Sean', MAX_DELAY + 1).exception()
    _logger.info('Greeting with a too long delay: %r', error)
