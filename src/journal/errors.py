"""Exceptions raised at the journal boundary."""


class JournalStorageError(Exception):
    """The journal's backing store could not be read or written."""


class InvalidSignalDirectionError(ValueError):
    """A signal without a tradable direction (HOLD) was logged."""
