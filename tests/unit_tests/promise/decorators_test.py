# -*- coding: utf-8 -*-

import pytest

from settle.promise import Deferred, Promise, wrap_promise


class TestDecorator(object):

    def test_wrap_sync_function(self):
        @wrap_promise
        def f(x):
            return x * 3

        p = f(30)
        assert isinstance(p, Promise)
        assert p.result(0.001) == 90

    def test_wrap_function_returning_promise(self):
        @wrap_promise
        def f(x):
            return Promise.resolve(x + 10)

        p = f(30)
        assert isinstance(p, Promise)
        assert p.result(0.001) == 40

    def test_wrap_function_with_exception(self):
        class MyException(Exception):
            pass

        @wrap_promise
        def f(x):
            raise MyException()

        p = f(30)
        assert isinstance(p, Promise)
        with pytest.raises(MyException):
            p.result(0.001)

    def test_wrap_function_returning_pending_promise(self):
        """The Promise returned by the function is given back as is."""
        df = Deferred()

        @wrap_promise
        def f():
            return df.promise

        p = f()
        assert p is df.promise
        df.resolve('late')
        assert p.result() == 'late'

    def test_wrap_keeps_function_name(self):
        @wrap_promise
        def compute(x):
            return x

        assert compute.__name__ == 'compute'
