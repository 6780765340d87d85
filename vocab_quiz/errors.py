"""Exception types raised by the quiz core."""
from __future__ import annotations


class VocabQuizError(Exception):
    pass


class LoadError(VocabQuizError):
    """The vocabulary source could not be fetched or decoded."""


class DataFormatError(LoadError):
    """The vocabulary source decoded, but is not a list of records."""


class EmptySelectionError(VocabQuizError):
    """The quiz configuration leaves no eligible entries."""


class InvalidStateAccess(VocabQuizError):
    """A session operation was called in the wrong state."""
