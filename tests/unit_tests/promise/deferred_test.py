# -*- coding: utf-8 -*-

import pytest

from settle.promise import Deferred, Promise, TimeoutError, schedule


class TestDeferred(object):

    def test_deferred_resolve_promise(self):
        df = Deferred()
        assert isinstance(df.promise, Promise)

        with pytest.raises(TimeoutError):
            df.promise.result(0.001)
        df.resolve('Value')
        assert df.promise.result(0.001) == 'Value'

    def test_deferred_reject_promise(self):
        class MyException(Exception):
            pass

        df = Deferred()
        with pytest.raises(TimeoutError):
            df.promise.result(0.001)
        df.reject(MyException())

        with pytest.raises(MyException):
            df.promise.result(0.001)

    def test_deferred_resolved_by_scheduled_callback(self, clock):
        df = Deferred()
        schedule(lambda: df.resolve('done'), 100)

        assert df.promise.result() == 'done'
        assert clock.now == pytest.approx(0.1)

    def test_deferred_first_settlement_wins(self):
        df = Deferred()
        df.resolve('first')
        df.reject(ValueError())
        assert df.promise.result() == 'first'

    def test_deferred_name(self):
        df = Deferred(_name='MY TASK')
        assert repr(df.promise) == 'Promise(MY TASK P)'
