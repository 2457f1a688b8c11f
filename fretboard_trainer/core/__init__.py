"""Core components for the fretboard trainer."""

# Import interfaces for easier access
from .interfaces import (
    IKeyValueStorage,
    IScheduledTask,
    IScheduler,
)
from .exceptions import (
    InvalidConfiguration,
    StorageReadFailure,
    StorageWriteFailure,
    TrainerError,
)

__all__ = [
    "IKeyValueStorage",
    "IScheduledTask",
    "IScheduler",
    "InvalidConfiguration",
    "StorageReadFailure",
    "StorageWriteFailure",
    "TrainerError",
]
