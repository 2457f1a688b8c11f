"""Defines the core interfaces for the fretboard trainer."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Optional


class IKeyValueStorage(ABC):
    """Interface for string-valued persistent storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key was never written."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Forget a key. Removing a missing key is not an error."""
        pass


class IScheduledTask(ABC):
    """Handle for a callback registered with an IScheduler."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class IScheduler(ABC):
    """Interface for deferred callbacks on the caller's thread."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> IScheduledTask:
        """Run callback once, no sooner than delay_ms from now."""
        pass

    @abstractmethod
    def run_pending(self) -> int:
        """Run every task that has come due. Returns how many ran."""
        pass
