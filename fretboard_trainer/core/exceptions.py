"""Exceptions raised by the fretboard trainer core."""


class TrainerError(Exception):
    """Base class for fretboard trainer errors."""


class StorageReadFailure(TrainerError):
    """A persisted record could not be read or decoded."""


class StorageWriteFailure(TrainerError):
    """A record could not be written (disk full, permissions, ...)."""


class InvalidConfiguration(TrainerError, ValueError):
    """No fret or no string is enabled, so no round can be drawn."""
