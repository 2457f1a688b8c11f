import random
from typing import Optional

from .core.events import RoundEvents, RoundEventType
from .core.exceptions import InvalidConfiguration
from .core.interfaces import IScheduledTask, IScheduler
from .logger import get_logger
from .note_types import (
    ALREADY_ANSWERED,
    GuessResult,
    Position,
    RoundPhase,
    RoundState,
    SessionCounters,
    SettingsRecord,
)
from .pitch import note_at_position
from .stats import StatsStore

# Get logger for this module
logger = get_logger(__name__)

AUTO_ADVANCE_DELAY_MS = 800


class RoundController:
    """The quiz loop: draw a position, take one guess, score it, move on.

    A correct guess schedules the next round after a short delay; a wrong one
    waits for advance() so the player can look at the answer.
    """

    def __init__(
        self,
        stats_store: StatsStore,
        scheduler: IScheduler,
        rng: Optional[random.Random] = None,
        auto_advance_delay_ms: float = AUTO_ADVANCE_DELAY_MS,
    ) -> None:
        """Initialize the controller.

        Args:
            stats_store: Receives every accepted guess
            scheduler: Runs the auto-advance after a correct guess
            rng: Source of randomness, injectable for tests
            auto_advance_delay_ms: Pause before the next round after a correct guess
        """
        self.stats_store = stats_store
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.auto_advance_delay_ms = auto_advance_delay_ms
        self.events = RoundEvents()
        self.session = SessionCounters()

        self.state: Optional[RoundState] = None
        self._settings: Optional[SettingsRecord] = None
        self._pending_advance: Optional[IScheduledTask] = None

    @property
    def phase(self) -> Optional[RoundPhase]:
        """None before the first round."""
        return self.state.phase if self.state else None

    @property
    def auto_advance_pending(self) -> bool:
        return self._pending_advance is not None and not self._pending_advance.cancelled

    def _cancel_pending_advance(self) -> None:
        if self._pending_advance is not None:
            self._pending_advance.cancel()
            self._pending_advance = None

    def new_round(self, settings: SettingsRecord) -> RoundState:
        """Draw a fresh position from the enabled frets and strings.

        Raises:
            InvalidConfiguration: If no fret or no string is enabled
        """
        self._cancel_pending_advance()
        self._settings = settings

        frets = settings.enabled_frets()
        strings = settings.enabled_strings()
        if not frets or not strings:
            raise InvalidConfiguration(
                "Enable at least one fret and one string to start a round"
            )

        position = Position(string=self.rng.choice(strings), fret=self.rng.choice(frets))
        old_state = self.state
        self.state = RoundState(position=position, correct_answer=note_at_position(position))

        logger.debug(
            "New position: %s -> %s (was: %s)",
            position,
            self.state.correct_answer,
            old_state.position if old_state else None,
        )
        self.events.emit(RoundEventType.ROUND_STARTED, self.state)
        return self.state

    def advance(self) -> RoundState:
        """Move on to the next round using the settings of the last one."""
        if self._settings is None:
            raise RuntimeError("No round has been started yet")
        return self.new_round(self._settings)

    def guess(self, note: str) -> GuessResult:
        """Answer the current round. Only the first guess per round counts."""
        if self.state is None or self.state.answered:
            logger.debug("Ignoring guess %r: no round awaiting an answer", note)
            return ALREADY_ANSWERED

        state = self.state
        is_correct = note == state.correct_answer
        self.state = RoundState(
            position=state.position, correct_answer=state.correct_answer, answered=True
        )

        self.session.total += 1
        if is_correct:
            self.session.correct += 1
        self.stats_store.commit_attempt(state.correct_answer, state.position.fret, is_correct)

        result = GuessResult(
            is_correct=is_correct, correct_answer=state.correct_answer, guess=note
        )
        logger.info(
            "Guess %s at %s: %s (answer %s)",
            note,
            state.position,
            "CORRECT" if is_correct else "WRONG",
            state.correct_answer,
        )

        if is_correct:
            self._pending_advance = self.scheduler.call_later(
                self.auto_advance_delay_ms, self._auto_advance
            )

        self.events.emit(RoundEventType.GUESS_EVALUATED, self.state, result)
        return result

    def _auto_advance(self) -> None:
        self._pending_advance = None
        try:
            self.advance()
        except InvalidConfiguration as e:
            logger.error(f"Auto-advance failed: {e}")
            self.events.emit(RoundEventType.ERROR, e)

    def session_accuracy(self) -> int:
        """Percentage of this session's guesses that were right."""
        return self.session.accuracy

    def reset_session(self) -> None:
        self.session.reset()
        self.events.emit(RoundEventType.SESSION_RESET, self.session)
