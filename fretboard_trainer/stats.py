import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .core.exceptions import StorageReadFailure, StorageWriteFailure
from .core.interfaces import IKeyValueStorage
from .logger import get_logger
from .note_types import StatsRecord, Tally
from .pitch import DISPLAY_NOTES, FRET_COUNT
from .storage import STATS_KEY, decode_record

# Get logger for this module
logger = get_logger(__name__)


def empty_stats() -> StatsRecord:
    """A record with every note and fret seeded at 0/0."""
    return StatsRecord(
        note_stats={note: Tally() for note in DISPLAY_NOTES},
        fret_stats={fret: Tally() for fret in range(FRET_COUNT)},
    )


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _parse_tally(value: Any) -> Optional[Tally]:
    if not isinstance(value, dict):
        return None
    correct, total = value.get("correct"), value.get("total")
    if not (_is_count(correct) and _is_count(total)) or correct > total:
        return None
    return Tally(correct=correct, total=total)


def _parse_fret_key(key: Any) -> Optional[int]:
    try:
        fret = int(key)
    except (TypeError, ValueError):
        return None
    return fret if fret >= 0 else None


def validate_stats(raw: Any) -> Tuple[StatsRecord, List[str]]:
    """Build a StatsRecord from decoded JSON, field by field.

    Malformed tallies are dropped and reported as e.g. 'noteStats.A'; the
    canonical notes and frets are then re-seeded at 0/0.

    Returns:
        The record, and the names of the fields that fell back to defaults
    """
    record = empty_stats()
    defaulted: List[str] = []
    data = raw if isinstance(raw, dict) else {}

    # The totals are one pair: both are kept or both fall back to zero
    total_correct, total_attempts = data.get("totalCorrect"), data.get("totalAttempts")
    if _is_count(total_correct) and _is_count(total_attempts) and total_correct <= total_attempts:
        record.total_correct = total_correct
        record.total_attempts = total_attempts
    else:
        defaulted.extend(["totalCorrect", "totalAttempts"])

    note_stats = data.get("noteStats")
    if isinstance(note_stats, dict):
        for note, value in note_stats.items():
            tally = _parse_tally(value)
            if tally is None:
                defaulted.append(f"noteStats.{note}")
            else:
                record.note_stats[note] = tally
    else:
        defaulted.append("noteStats")

    fret_stats = data.get("fretStats")
    if isinstance(fret_stats, dict):
        for key, value in fret_stats.items():
            fret = _parse_fret_key(key)
            tally = _parse_tally(value)
            if fret is None or tally is None:
                defaulted.append(f"fretStats.{key}")
            else:
                record.fret_stats[fret] = tally
    else:
        defaulted.append("fretStats")

    return record, defaulted


@dataclass(frozen=True)
class StatRow:
    """One line of the statistics view."""

    label: str
    correct: int
    total: int

    @property
    def accuracy(self) -> int:
        return Tally(self.correct, self.total).accuracy

    @property
    def band(self) -> Optional[str]:
        """'good', 'medium' or 'poor'; None when there were no attempts."""
        if self.total == 0:
            return None
        if self.accuracy >= 80:
            return "good"
        if self.accuracy >= 50:
            return "medium"
        return "poor"

    @property
    def value_text(self) -> str:
        return f"{self.accuracy}%" if self.total > 0 else "-"


def fret_label(fret: int) -> str:
    return "Open" if fret == 0 else f"Fret {fret}"


def note_rows(record: StatsRecord) -> List[StatRow]:
    rows = []
    for note in DISPLAY_NOTES:
        tally = record.note_stats.get(note) or Tally()
        rows.append(StatRow(note, tally.correct, tally.total))
    return rows


def fret_rows(record: StatsRecord) -> List[StatRow]:
    rows = []
    for fret in range(FRET_COUNT):
        tally = record.fret_stats.get(fret) or Tally()
        rows.append(StatRow(fret_label(fret), tally.correct, tally.total))
    return rows


class StatsStore:
    """All-time statistics, persisted after every attempt."""

    def __init__(self, storage: IKeyValueStorage, key: str = STATS_KEY):
        self.storage = storage
        self.key = key
        self._record: Optional[StatsRecord] = None

    @property
    def current(self) -> StatsRecord:
        """The in-memory record, loaded on first use."""
        if self._record is None:
            self._record = self.load()
        return self._record

    def load(self) -> StatsRecord:
        """Read persisted stats. Never raises; unreadable data becomes zeros."""
        raw = None
        try:
            raw = decode_record(self.storage.get_item(self.key))
        except StorageReadFailure as e:
            logger.error(f"Failed to load stats: {e}")

        record, defaulted = validate_stats(raw)
        if raw is not None and defaulted:
            logger.warning(f"Stats fields reset to defaults: {', '.join(defaulted)}")
        self._record = record
        return record

    def save(self, record: StatsRecord) -> bool:
        """Write the record. Failures are logged and otherwise ignored."""
        try:
            self.storage.set_item(self.key, json.dumps(record.to_dict()))
            return True
        except StorageWriteFailure as e:
            logger.error(f"Failed to save stats: {e}")
            return False

    @staticmethod
    def record_attempt(record: StatsRecord, note: str, fret: int, correct: bool) -> StatsRecord:
        """Count one answer against the note and fret it was asked for.

        Missing note/fret entries are created on the fly.
        """
        hit = 1 if correct else 0
        record.total_attempts += 1
        record.total_correct += hit

        note_tally = record.note_stats.setdefault(note, Tally())
        note_tally.total += 1
        note_tally.correct += hit

        fret_tally = record.fret_stats.setdefault(fret, Tally())
        fret_tally.total += 1
        fret_tally.correct += hit
        return record

    def commit_attempt(self, note: str, fret: int, correct: bool) -> StatsRecord:
        """record_attempt() on the current record, then write it through."""
        record = self.record_attempt(self.current, note, fret, correct)
        self.save(record)
        return record

    def reset(self) -> StatsRecord:
        """Forget all persisted progress."""
        self._record = empty_stats()
        try:
            self.storage.remove_item(self.key)
        except StorageWriteFailure as e:
            logger.error(f"Failed to clear stats, overwriting instead: {e}")
            self.save(self._record)
        logger.info("Statistics reset")
        return self._record
