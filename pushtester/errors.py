"""
Exceptions raised on the shell side of the Web Push Tester.

The store and the dispatcher never raise these to their callers; they report
failures through their return values.
"""


class PushTesterError(Exception):
    """Base class for errors raised by the tester."""


class ValidationError(PushTesterError):
    """A required field is missing or malformed. Raised before any network I/O."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
