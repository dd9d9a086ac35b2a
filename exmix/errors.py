"""
Caller-visible failures. Both abort a mix run before any output is produced;
every other problem is reported as a ``MixWarning`` instead.
"""

from __future__ import annotations


class ExmixError(ValueError):
    """Base class for errors raised by the mixer."""


class InputEmptyError(ExmixError):
    """The source document is empty or whitespace only."""

    def __init__(self, message: str = "Source document is empty"):
        super().__init__(message)


class NoCodesSpecifiedError(ExmixError):
    """No exam code remained after trimming the code list."""

    def __init__(self, message: str = "At least one exam code is required"):
        super().__init__(message)
