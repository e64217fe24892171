# -*- coding: utf-8 -*-

import logging
from functools import partial
from .errors import RejectionError, TimeoutError
from .loop import get_loop

_logger = logging.getLogger(__name__)


class Promise(object):
    """It represents an operation expected to be completed in the future.

    A Promise is used for asynchronous computation. It contains a value not yet
    known when the Promise is created. It allows to set callbacks who will be
    called as soon as the result is known. It's a "promise" of a future value.

    Callbacks are never called directly: they're queued in the event loop, and
    executed in a later turn, in the order they have been registered.
    Promises are not thread-safe; they must be used from the thread running
    the loop.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    def __init__(self, executor, _name=None, _previous=None, loop=None):
        """Constructor of the Promise.

        Generate the two callbacks for the executor, then call the `executor`.
        It means the executor will be fully executed before the the constructor
        returns.
        If the executor raises an exception, it's caught and the Promise is
        rejected with this exception.

        Args:
            executor (callable): Takes 2 callable arguments:
                The first one, `on_fulfilled()` should be called when the
                Promise is fulfilled (ie the tasks is done) and must accept the
                result's value as its only argument. If the value is another
                Promise, this Promise will follow its state.
                The second, `on_rejected()`, should be called when an error
                occurs. Its argument should be an instance of `Exception`.
            _name (str): if set, name used when converted to text.
            loop (EventLoop, optional): loop used to execute the callbacks.
                Default to the loop returned by `get_loop()`.
        """

        self._state = self.PENDING
        self._result = None
        self._error = None
        self._loop = loop or get_loop()
        self._name = _name or getattr(executor, '__name__', '???')
        self._previous = _previous

        # Set when the first call to on_fulfilled() or on_rejected() is done.
        # The state can stay PENDING if the Promise follows another Promise.
        self._is_resolved = False

        self._callbacks = []
        self._errbacks = []

        def on_fulfilled(result):
            if self._is_resolved:
                _logger.debug('Try to fulfill Promise %r already resolved. '
                              'New result will be ignored: %r', self, result)
                return
            self._is_resolved = True

            if result is self:
                self._settle(self.REJECTED,
                             TypeError('A Promise cannot be resolved with '
                                       'itself.'))
            elif isinstance(result, Promise):
                result._add_callback(partial(self._settle, self.FULFILLED))
                result._add_errback(partial(self._settle, self.REJECTED))
            else:
                self._settle(self.FULFILLED, result)

        def on_rejected(error):
            if self._is_resolved:
                _logger.debug('Try to reject Promise %r already resolved. '
                              'New error will be ignored: %r', self, error)
                return
            self._is_resolved = True
            self._settle(self.REJECTED, error)

        try:
            executor(on_fulfilled, on_rejected)
        except Exception as error:
            on_rejected(error)

    @property
    def state(self):
        """str: one of PENDING, FULFILLED or REJECTED."""
        return self._state

    def result(self, timeout=None):
        """Run the loop until the result is available, then returns it.

        The timeout limits the time spent waiting for delayed callbacks. The
        callbacks ready to be executed are always executed.

        Args:
            timeout (float, optional): if set, maximum time to wait the promise
                to be fulfilled, in seconds. By default, it waits as long as
                the loop has callbacks to execute.
        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            TimeoutError: if the promise is not settled within the delay, or
                if the loop has nothing left to execute.
            RejectionError: if the promise is rejected with a value who is
                not an exception.
            *: If the promise is rejected, the rejection cause is raised.
        """
        self._wait(timeout)

        if self._state == self.REJECTED:
            if isinstance(self._error, BaseException):
                raise self._error
            raise RejectionError(self._error)
        return self._result

    def exception(self, timeout=None):
        """Run the loop until the promise is settled and returns it's error.

        Args:
            timeout (float, optional): if set, maximum time to wait the promise
                to be settled, in seconds.
        Returns:
            Exception: the error causing the rejection of the Promise.
            None: if the promise is fulfilled.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
        """
        self._wait(timeout)
        return self._error

    def then(self, on_fulfilled=None, on_rejected=None):
        """Create a new promise from callbacks called when this one is settled.

        If the promise is fulfilled, the `on_fulfilled` callback will be
        called. Otherwise (the promise has been rejected), the `on_rejected`
        callback is called.
        In any case, the callback will define the state of the returned
        Promise. If the callback raises an exception, the new Promise is
        rejected. The callback can returns:
        - A value: the new promise will be fulfilled with this value.
        - Another Promise: when fulfilled or rejected, will transfer its status
            (state and result/error) to the Promise returned by this method.

        If a callback is not defined, the state of the self promise is
        transferred at the new promise (the state and the value/error).

        Args:
            on_fulfilled (callable, optional):  This callback will receive the
                result of the original promise as argument.
            on_rejected (callable, optional): This callback will receive the
                exception raised by the original promise as argument.
        Returns:
            Promise<*>: new promise depending of self.
        """

        def chained_promise(fulfilled, rejected):

            def callback(result):
                if on_fulfilled is None:
                    return fulfilled(result)
                try:
                    new_result = on_fulfilled(result)
                except Exception as error:
                    return rejected(error)
                fulfilled(new_result)

            def errback(error):
                if on_rejected is None:
                    return rejected(error)
                try:
                    new_result = on_rejected(error)
                except Exception as err:
                    return rejected(err)
                fulfilled(new_result)

            self._add_callback(callback)
            self._add_errback(errback)

        if not on_rejected:
            name = '%s' % getattr(on_fulfilled, '__name__', '???')
        elif not on_fulfilled:
            name = '<None, %s>' % getattr(on_rejected, '__name__', '???')
        else:
            name = '<%s, %s>' % (getattr(on_fulfilled, '__name__', '???'),
                                 getattr(on_rejected, '__name__', '???'))
        return Promise(chained_promise, _name=name, _previous=self,
                       loop=self._loop)

    def catch(self, on_rejected):
        """Create a new promise with a callback called when an error occurs.

        Alias of `self.then(None, on_rejected)`

        Args:
            on_rejected (callable): Must take an argument instance of Exception
                (or one of its subclass). Will be called if `self` is rejected.
        returns:
            Promise<*>: new Promise chained to `self`. If `self` is fulfilled,
                the promised value will be the same as `self`. Otherwise, the
                value returned by the `on_rejected()` callback.
        """
        return self.then(None, on_rejected)

    def safeguard(self):
        """Catch all errors and log them with the most details possible.

        This method is aimed to protect the program from uncaught rejected
        Promise. If no error handler has been set (via then() or catch()), the
        default behavior is to do nothing, and thus, errors are silently
        ignored.
        Calling `safeguard()` after all chains are set will catch these errors,
        and log them as ERROR with the maximum of details possible.
        """
        def guard(error):
            if isinstance(error, BaseException):
                _logger.error('[SAFEGUARD] %s', self, exc_info=error)
            else:
                _logger.error('[SAFEGUARD] %s rejected with %r', self, error)

        self._add_errback(guard)

    def __repr__(self):
        return 'Promise(%s)' % self._inner_print()

    def _inner_print(self):
        if self._state == self.REJECTED:
            state = 'R'
        elif self._state == self.FULFILLED:
            state = 'F'
        else:
            state = 'P'

        if self._previous:
            return '%s -> %s %s' % (self._previous._inner_print(), self._name,
                                    state)
        return '%s %s' % (self._name, state)

    @classmethod
    def resolve(cls, value, loop=None):
        """Create a promise who resolves the selected value.

        Args:
            value: result of the promise. If it's a promise, the new Promise
                will follow its state.
            loop (EventLoop, optional): loop of the new Promise. Default to
                the loop of `value` if it's a Promise, or to `get_loop()`.
        Returns:
            Promise: new Promise fulfilled, containing the value passed in
                parameter (or the value of the Promise passed in parameter).
        """
        if loop is None and isinstance(value, Promise):
            loop = value._loop
        return cls(lambda ok, error: ok(value), _name='RESOLVE', loop=loop)

    @classmethod
    def reject(cls, reason, loop=None):
        """Create a Promise rejected for the reason specified.

        Args:
            reason: Exception set to the Promise
            loop (EventLoop, optional): loop of the new Promise.
        Returns:
            Promise: new Promise already rejected.
        """
        return cls(lambda ok, error: error(reason), _name='REJECT', loop=loop)

    @classmethod
    def all(cls, promises, loop=None):
        """Create a Promise who wait a list of promises to be all fulfilled.

        The resulting Promise resolve when all of the promises in the list are
        resolved, and returns a list of all the resulting values, keeping the
        order of the promise list.
        If a promise is rejected, then the resulting promise is rejected with
        the same reason, and all results from other promises are ignored.

        Args:
            promises (iterable): Promises, or direct values considered as
                fulfilled Promises.
            loop (EventLoop, optional): loop of the resulting Promise. Default
                to the loop of the first Promise of the list.
        Returns:
            Promise<list>: resulting promise, fulfilled when all promises are
                fulfilled, or rejected when one of the promises is rejected.
        """
        promises = list(promises)
        loop = cls._find_loop(promises, loop)
        promises = [cls._ensure_promise(p, loop) for p in promises]
        has_error = [False]

        _remaining_tasks = [len(promises)]
        results = [None] * len(promises)

        if _remaining_tasks[0] == 0:
            return cls.resolve([], loop=loop)

        def executor(resolve, reject):
            def resolve_one_promise(index, value):
                if has_error[0]:
                    return
                results[index] = value
                _remaining_tasks[0] -= 1
                if _remaining_tasks[0] == 0:
                    resolve(results)

            def reject_one_promise(reason):
                if has_error[0]:
                    return
                has_error[0] = True
                reject(reason)

            for index, p in enumerate(promises):
                p.then(partial(resolve_one_promise, index), reject_one_promise)

        return cls(executor, _name='ALL', loop=loop)

    @classmethod
    def race(cls, promises, loop=None):
        """Resolve or reject with the fastest Promise.

        Returns a new Promise who will be settled as soon as one of the
        promises is settled. Result value or rejection reason of the first
        settled promise are transmitted. If several promises are already
        settled, the first of the list wins.
        All other Promise result's will be ignored.

        An empty list gives a Promise who will never be settled.

        Args:
            promises (iterable): Promises, or direct values considered as
                fulfilled Promises.
            loop (EventLoop, optional): loop of the resulting Promise. Default
                to the loop of the first Promise of the list.
        Returns:
            Promise: a promise following the first settled promise.
        """
        promises = list(promises)
        loop = cls._find_loop(promises, loop)
        promises = [cls._ensure_promise(p, loop) for p in promises]
        is_settled = [False]

        if not promises:
            _logger.debug('Promise.race() called with an empty list. The '
                          'resulting Promise will never be settled.')

        def executor(resolve, reject):
            def resolve_once(result):
                if is_settled[0]:
                    return
                is_settled[0] = True
                resolve(result)

            def reject_once(reason):
                if is_settled[0]:
                    return
                is_settled[0] = True
                reject(reason)

            for p in promises:
                p.then(resolve_once, reject_once)

        return cls(executor, _name='RACE', loop=loop)

    @classmethod
    def _ensure_promise(cls, value, loop):
        if isinstance(value, Promise):
            return value
        return cls.resolve(value, loop=loop)

    @staticmethod
    def _find_loop(values, loop):
        if loop is not None:
            return loop
        for value in values:
            if isinstance(value, Promise):
                return value._loop
        return None

    def _wait(self, timeout):
        self._loop.run_until(lambda: self._state != self.PENDING, timeout)
        if self._state == self.PENDING:
            raise TimeoutError('%r is still pending.' % self)

    def _settle(self, state, value):
        if state == self.FULFILLED:
            self._result = value
            observers = self._callbacks
        else:
            if not isinstance(value, Exception):
                _logger.warning('Promise %r rejected with non-exception '
                                'value: %r', self, value)
            self._error = value
            observers = self._errbacks
        self._state = state

        # Free the references
        self._callbacks = None
        self._errbacks = None

        for observer in observers:
            self._loop.call_soon(self._exec_callback, observer, value,
                                 state == self.REJECTED)

    @staticmethod
    def _exec_callback(callback, value, is_errback=False):
        try:
            callback(value)
        except Exception:
            if is_errback:
                _logger.exception("Promise errback raise an exception!")
            else:
                _logger.exception("Promise callback raise an exception!")

    def _add_callback(self, callback):
        if self._state == self.PENDING:
            self._callbacks.append(callback)
        elif self._state == self.FULFILLED:
            self._loop.call_soon(self._exec_callback, callback, self._result)

    def _add_errback(self, errback):
        if self._state == self.PENDING:
            self._errbacks.append(errback)
        elif self._state == self.REJECTED:
            self._loop.call_soon(self._exec_callback, errback, self._error,
                                 True)
