from typing import Optional

from .core.exceptions import StorageReadFailure, StorageWriteFailure
from .storage import MemoryStorage


class FailingStorage(MemoryStorage):
    """A storage for unit tests whose reads and/or writes fail on demand."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True, initial=None):
        super().__init__(initial)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.write_attempts = 0

    def get_item(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageReadFailure(f"read of {key} failed")
        return super().get_item(key)

    def set_item(self, key: str, value: str) -> None:
        self.write_attempts += 1
        if self.fail_writes:
            raise StorageWriteFailure("quota exceeded")
        super().set_item(key, value)

    def remove_item(self, key: str) -> None:
        if self.fail_writes:
            raise StorageWriteFailure("storage unavailable")
        super().remove_item(key)
