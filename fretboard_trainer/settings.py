"""Persisted fret/string selection for quiz generation."""

import json
from typing import Any, List, Optional, Tuple

from .core.exceptions import StorageReadFailure, StorageWriteFailure
from .core.interfaces import IKeyValueStorage
from .logger import get_logger
from .note_types import SettingsDimension, SettingsRecord
from .pitch import FRET_COUNT, STRING_COUNT
from .storage import SETTINGS_KEY, decode_record

# Get logger for this module
logger = get_logger(__name__)

_LENGTHS = {
    SettingsDimension.FRETS: FRET_COUNT,
    SettingsDimension.STRINGS: STRING_COUNT,
}


def default_settings() -> SettingsRecord:
    """Everything enabled."""
    return SettingsRecord(frets=[True] * FRET_COUNT, strings=[True] * STRING_COUNT)


def _valid_mask(value: Any, length: int) -> bool:
    return (
        isinstance(value, list)
        and len(value) == length
        and all(isinstance(v, bool) for v in value)
        and any(value)
    )


def validate_settings(raw: Any) -> Tuple[SettingsRecord, List[str]]:
    """Build a SettingsRecord from decoded JSON, field by field.

    Args:
        raw: Whatever json.loads produced (or None if nothing was stored)

    Returns:
        The record, and the names of the fields that fell back to defaults
    """
    record = default_settings()
    defaulted = []
    data = raw if isinstance(raw, dict) else {}
    for dimension, length in _LENGTHS.items():
        value = data.get(dimension.value)
        if _valid_mask(value, length):
            setattr(record, dimension.value, list(value))
        else:
            defaulted.append(dimension.value)
    return record, defaulted


class SettingsStore:
    """Loads, validates and writes through the SettingsRecord.

    The mutators never leave a dimension with zero enabled entries.
    """

    def __init__(self, storage: IKeyValueStorage, key: str = SETTINGS_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> SettingsRecord:
        """Read persisted settings. Never raises; bad fields become all-enabled."""
        raw = None
        try:
            raw = decode_record(self.storage.get_item(self.key))
        except StorageReadFailure as e:
            logger.error(f"Failed to load settings: {e}")

        record, defaulted = validate_settings(raw)
        if raw is not None and defaulted:
            logger.warning(f"Settings fields reset to defaults: {', '.join(defaulted)}")
        return record

    def save(self, record: SettingsRecord) -> bool:
        """Write the record. Failures are logged; the in-memory record stays authoritative."""
        try:
            self.storage.set_item(self.key, json.dumps(record.to_dict()))
            return True
        except StorageWriteFailure as e:
            logger.error(f"Failed to save settings: {e}")
            return False

    def _set(self, record: SettingsRecord, dimension: SettingsDimension, index: int, enabled: bool) -> bool:
        mask = getattr(record, dimension.value)
        if not 0 <= index < len(mask):
            logger.warning(f"Ignoring {dimension.value} index out of range: {index}")
            return False
        if not enabled and mask[index] and sum(mask) <= 1:
            logger.debug(f"Refusing to disable the last enabled {dimension.value} entry")
            return False
        mask[index] = bool(enabled)
        self.save(record)
        return True

    def set_fret(self, record: SettingsRecord, index: int, enabled: bool) -> bool:
        """Enable or disable one fret. Returns False if the change was refused."""
        return self._set(record, SettingsDimension.FRETS, index, enabled)

    def set_string(self, record: SettingsRecord, index: int, enabled: bool) -> bool:
        """Enable or disable one string. Returns False if the change was refused."""
        return self._set(record, SettingsDimension.STRINGS, index, enabled)

    def toggle(self, record: SettingsRecord, dimension: SettingsDimension, index: int) -> bool:
        mask = getattr(record, dimension.value)
        if not 0 <= index < len(mask):
            logger.warning(f"Ignoring {dimension.value} index out of range: {index}")
            return False
        return self._set(record, dimension, index, not mask[index])

    def select_all(self, record: SettingsRecord, dimension: SettingsDimension) -> None:
        setattr(record, dimension.value, [True] * _LENGTHS[dimension])
        self.save(record)

    def select_none(self, record: SettingsRecord, dimension: SettingsDimension) -> None:
        """Disable everything except the first entry."""
        setattr(
            record,
            dimension.value,
            [i == 0 for i in range(_LENGTHS[dimension])],
        )
        self.save(record)

    def reset_defaults(self, record: Optional[SettingsRecord] = None) -> SettingsRecord:
        """Re-enable every fret and string, in place when a record is given."""
        defaults = default_settings()
        if record is None:
            record = defaults
        else:
            record.frets = defaults.frets
            record.strings = defaults.strings
        self.save(record)
        return record
