# -*- coding: utf-8 -*-

from functools import wraps
from .deferred import Deferred
from .errors import RejectionError
from .promise import Promise


def reduce_coroutine(safeguard=False):
    """Decorator who converts a coroutine of promises into a single promise.

    The greatest interest is the ability to write a function in an
    synchronous-like style, using many asynchronous Promises.
    Whatever is the number of Promises or async calls used, the result will
    always be an unique Promise wrapping the whole process.

    Each Promise yielded is resolved, then its value is sent back to the
    generator. If the Promise is rejected, the error is raised at the
    `yield` instruction.
    The first non-Promise value yielded is the result: the generator is
    closed and the Promise is fulfilled with this value. If the generator
    ends, the result is the value of the `return` statement if any, or the
    last value sent to the generator. A generator who catches an error then
    ends without yielding is fulfilled with its `return` value (None by
    default).

    Args:
        safeguard (boolean): if true, use `Promise.safeguard()` on the
            resulting promise.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            """
            Args:
                *args
                **kwargs
            Returns:
                Promise<*>
            """
            df = Deferred(_name='COROUTINE %s' % func.__name__)
            if safeguard:
                df.promise.safeguard()

            try:
                # Create generator; Initialization phase
                gen = func(*args, **kwargs)
            except Exception as error:
                df.reject(error)
                return df.promise

            def _call_next_or_set_result(value):
                if isinstance(value, Promise):
                    value.then(iter_next, iter_error)
                else:
                    gen.close()
                    df.resolve(value)

            def iter_next(yielded_value):
                try:
                    next_value = gen.send(yielded_value)
                except StopIteration as stop:
                    if stop.value is not None:
                        return df.resolve(stop.value)
                    return df.resolve(yielded_value)
                except Exception as error:
                    return df.reject(error)
                _call_next_or_set_result(next_value)

            def iter_error(raised_error):
                if not isinstance(raised_error, BaseException):
                    raised_error = RejectionError(raised_error)
                try:
                    next_value = gen.throw(raised_error)
                except StopIteration as stop:
                    # The generator has caught the error, then returned.
                    return df.resolve(stop.value)
                except Exception as error:
                    return df.reject(error)
                _call_next_or_set_result(next_value)

            # Start and resolve loop.
            try:
                f = next(gen)
            except StopIteration as stop:
                df.resolve(stop.value)
                return df.promise
            except Exception as error:
                df.reject(error)
                return df.promise
            _call_next_or_set_result(f)

            return df.promise

        return wrapper
    return decorator
