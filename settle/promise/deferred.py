# -*- coding: utf-8 -*-

from .promise import Promise


class Deferred(object):
    """Settle a Promise from outside of its executor.

    The Promise constructor only exposes `resolve` and `reject` to the
    executor. A Deferred keeps them, so the code who starts an operation can
    hand `df.promise` to its callers and settle it later, from any callback.

    Example:

        >>> df = Deferred()
        >>> schedule(lambda: df.resolve('done'), 100)
        >>> df.promise.result()
        'done'

    Attributes:
        promise (Promise): the pending Promise, settled through this object.
        resolve (function): fulfill the promise (a Promise value is
            followed). Only the first call to `resolve` or `reject` counts.
        reject (function): reject the promise.
    """

    def __init__(self, _name=None, loop=None):
        self.promise = Promise(self._executor, _name=_name, loop=loop)

    def _executor(self, resolve, reject):
        self.resolve = resolve
        self.reject = reject
