# -*- coding: utf-8 -*-


class TimeoutError(Exception):
    """An operation could not be executed within the time allowed."""
    pass


class RejectionError(Exception):
    """A Promise has been rejected with a value who is not an exception.

    Attributes:
        reason: the original rejection value.
    """

    def __init__(self, reason):
        Exception.__init__(self, 'Promise rejected with non-exception value:'
                                 ' %r' % (reason,))
        self.reason = reason
