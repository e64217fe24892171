#!/usr/bin/env python
# -*- coding: utf-8 -*-

import datetime
import logging
import os
import sys

import pytest

from settle.common import path as settle_path
from settle.common.log import _excepthook, _get_file_handler, \
    ColoredFormatter, Context, set_debug_mode, set_logs_level

"""### TEST CASES ###
    _get_file_handler() in the log dir

    ColoredFormatter._colorize
    ColoredFormatter.formatTime
    ColoredFormatter.formatException
    ColoredFormatter.format doesn't alter the record

    Context open and close handlers

    set_debug_mode true
    set_debug_mode false

    set_logs_level
"""

colorFormater = ColoredFormatter()


@pytest.fixture(autouse=True)
def log_dir(tmpdir, monkeypatch):
    monkeypatch.setattr(settle_path, 'get_log_dir', lambda: str(tmpdir))
    return str(tmpdir)


@pytest.fixture(autouse=True)
def restore_levels(request):
    loggers = ['', 'settle', 'settle.promise', 'settle.greeting']
    levels = dict((name, logging.getLogger(name).level) for name in loggers)

    def _restore():
        for name, level in levels.items():
            logging.getLogger(name).setLevel(level)
    request.addfinalizer(_restore)


class TestLogFormating(object):

    def test_getFileHandler(self, log_dir):
        handler = _get_file_handler('test.log')
        try:
            assert handler.baseFilename == os.path.join(log_dir, 'test.log')
        finally:
            handler.close()

    @pytest.mark.parametrize('color', [
        'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL', 'NAME', 'DATE',
        'EXCEPTION_NAME', 'EXCEPTION_STR'])
    def test_colorize(self, color):
        assert colorFormater._colorize("plop", color) == \
            ColoredFormatter._colors[color] + "plop" + \
            ColoredFormatter._colors['RESET']

    def test_formatTime(self):
        record = logging.LogRecord(
            "record", logging.INFO, "/ici/", 123, "test", None, None)
        formated_record = colorFormater.formatTime(record, "%Y.%m.%d")
        expected_output = "\033[30;1m" + \
            datetime.date.today().strftime('%Y.%m.%d') + \
            ColoredFormatter._colors['RESET']

        assert formated_record == expected_output

    def test_formatException(self):
        try:
            raise Exception()
        except Exception:
            assert ColoredFormatter._colors['EXCEPTION_NAME'] + \
                "Exception" + ColoredFormatter._colors['RESET'] + \
                ":" + ColoredFormatter._colors['EXCEPTION_STR'] + \
                ColoredFormatter._colors['RESET'] in \
                colorFormater.formatException(sys.exc_info())

    def test_format_keeps_record_intact(self):
        formatter = ColoredFormatter(
            fmt='%(levelname)s %(name)s %(message)s')
        record = logging.LogRecord(
            "settle", logging.INFO, "/ici/", 123, "test", None, None)

        assert formatter.format(record) == \
            formatter._colorize('INFO', 'INFO') + ' ' + \
            formatter._colorize('settle', 'NAME') + ' test'
        assert record.name == 'settle'
        assert record.levelname == 'INFO'


class TestLogInit(object):

    def test_context(self, log_dir):
        logger = logging.getLogger()
        nb_handlers = len(logger.handlers)

        excepthook = sys.excepthook
        assert excepthook is not _excepthook

        with Context('test.log'):
            assert len(logger.handlers) == nb_handlers + 2
            assert logging.getLogger().getEffectiveLevel() == logging.INFO
            settle_logger = logging.getLogger("settle")
            assert settle_logger.getEffectiveLevel() == logging.DEBUG
            assert sys.excepthook is _excepthook

            logging.getLogger('settle.test').info('Written in the file')

        assert len(logger.handlers) == nb_handlers
        assert sys.excepthook is excepthook
        with open(os.path.join(log_dir, 'test.log')) as log_file:
            assert 'Written in the file' in log_file.read()

    def test_excepthook(self, caplog):
        try:
            raise ValueError('not caught')
        except ValueError:
            _excepthook(*sys.exc_info())

        assert caplog.records[-1].levelno == logging.CRITICAL
        assert 'Uncaught exception' in caplog.text


class TestLogLevels(object):

    def test_setDebugTrue(self):
        set_debug_mode(True)
        assert logging.getLogger().getEffectiveLevel() == logging.INFO
        assert logging.getLogger("settle").getEffectiveLevel() == \
            logging.DEBUG

    def test_setDebugFalse(self):
        set_debug_mode(False)
        assert logging.getLogger().getEffectiveLevel() == logging.WARNING
        assert logging.getLogger("settle").getEffectiveLevel() == \
            logging.INFO

    def test_set_logs_level(self):
        set_logs_level({'settle.promise': 'error', 'settle.greeting': '10'})
        assert logging.getLogger('settle.promise').level == logging.ERROR
        assert logging.getLogger('settle.greeting').level == logging.DEBUG

    def test_set_invalid_logs_level(self, caplog):
        set_logs_level({'settle.promise': 'plop'})
        assert 'Invalid log level "PLOP"' in caplog.text
