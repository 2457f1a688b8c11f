"""Type definitions for the fretboard trainer."""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional


def percentage(correct: int, total: int) -> int:
    """Whole-number accuracy, rounding halves up. Zero when nothing was attempted."""
    if total <= 0:
        return 0
    return int(math.floor(correct / total * 100 + 0.5))


@dataclass(frozen=True)
class Position:
    """Represents a position on the guitar fretboard."""

    string: int  # String index (0 is the high E string, 5 the low E)
    fret: int  # Fret number (0 for open string)

    def __str__(self):
        return f"S{self.string}F{self.fret}"


@dataclass
class Tally:
    """Running correct/total counter for one note or fret."""

    correct: int = 0
    total: int = 0

    @property
    def accuracy(self) -> int:
        return percentage(self.correct, self.total)

    def to_dict(self) -> Dict[str, int]:
        return {"correct": self.correct, "total": self.total}


@dataclass
class StatsRecord:
    """Persisted all-time statistics."""

    total_correct: int = 0
    total_attempts: int = 0
    note_stats: Dict[str, Tally] = field(default_factory=dict)
    fret_stats: Dict[int, Tally] = field(default_factory=dict)

    @property
    def accuracy(self) -> int:
        return percentage(self.total_correct, self.total_attempts)

    def to_dict(self) -> Dict:
        """JSON-ready form; fret keys become strings as in any JSON object."""
        return {
            "totalCorrect": self.total_correct,
            "totalAttempts": self.total_attempts,
            "noteStats": {note: t.to_dict() for note, t in self.note_stats.items()},
            "fretStats": {
                str(fret): t.to_dict() for fret, t in sorted(self.fret_stats.items())
            },
        }


@dataclass
class SettingsRecord:
    """Which frets and strings may be drawn for a round."""

    frets: List[bool]
    strings: List[bool]

    def enabled_frets(self) -> List[int]:
        return [i for i, enabled in enumerate(self.frets) if enabled]

    def enabled_strings(self) -> List[int]:
        return [i for i, enabled in enumerate(self.strings) if enabled]

    def to_dict(self) -> Dict[str, List[bool]]:
        return {"frets": list(self.frets), "strings": list(self.strings)}


class SettingsDimension(Enum):
    """The two boolean masks of a SettingsRecord."""

    FRETS = "frets"
    STRINGS = "strings"


class RoundPhase(Enum):
    AWAITING_GUESS = auto()
    ANSWERED = auto()


@dataclass(frozen=True)
class RoundState:
    """The live quiz round."""

    position: Position
    correct_answer: str  # Display note, e.g. 'C#/Db'
    answered: bool = False

    @property
    def phase(self) -> RoundPhase:
        return RoundPhase.ANSWERED if self.answered else RoundPhase.AWAITING_GUESS


@dataclass(frozen=True)
class GuessResult:
    """Outcome of a guess. `accepted` is False only for the ALREADY_ANSWERED sentinel."""

    is_correct: bool
    correct_answer: Optional[str]
    guess: Optional[str] = None
    accepted: bool = True


# Returned by RoundController.guess() when there is no round awaiting a guess
ALREADY_ANSWERED = GuessResult(
    is_correct=False, correct_answer=None, guess=None, accepted=False
)


@dataclass
class SessionCounters:
    """Process-lifetime score, never persisted."""

    correct: int = 0
    total: int = 0

    @property
    def accuracy(self) -> int:
        return percentage(self.correct, self.total)

    def reset(self) -> None:
        self.correct = 0
        self.total = 0
