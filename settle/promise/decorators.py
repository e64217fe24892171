# -*- coding: utf-8 -*-

from functools import wraps
from .promise import Promise


def wrap_promise(f):
    """Make a function always return a Promise, even when it fails.

    A Promise returned by `f` is given back untouched. Any other value is
    wrapped in a fulfilled Promise, and an exception raised by `f` is turned
    into a rejected Promise instead of being propagated to the caller.

    Example:

        >>> @wrap_promise
        ... def parse(text):
        ...     return int(text)
        >>> parse('x').exception()
        ValueError("invalid literal for int() with base 10: 'x'")
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            result = f(*args, **kwargs)
        except Exception as error:
            return Promise.reject(error)
        if isinstance(result, Promise):
            return result
        return Promise.resolve(result)

    return wrapper
