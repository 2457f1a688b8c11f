"""Adapters connecting UI front ends to the round controller and stores."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..core.events import RoundEventType
from ..core.exceptions import InvalidConfiguration
from ..logger import get_logger
from ..note_types import (
    GuessResult,
    Position,
    RoundState,
    SessionCounters,
    SettingsDimension,
    SettingsRecord,
)
from ..pitch import DISPLAY_NOTES
from ..round_controller import RoundController
from ..settings import SettingsStore
from ..stats import StatsStore

logger = get_logger(__name__)

NO_SELECTION_PROMPT = "Enable at least one fret and one string in Settings"


@dataclass
class FeedbackView:
    """What the screen should show for the current round."""

    position: Optional[Position] = None
    feedback: Optional[str] = None  # 'correct', 'incorrect' or None while awaiting a guess
    guessed: Optional[str] = None
    correct_answer: Optional[str] = None
    show_next: bool = False

    @property
    def message(self) -> str:
        if self.feedback == "correct":
            return "Correct!"
        if self.feedback == "incorrect":
            return f"Wrong! It was {self.correct_answer}"
        return ""


class UIAdapter(ABC):
    """Base class for UIs driving the round controller.

    Subclasses draw; this class keeps the FeedbackView in step with the
    controller's events and turns user actions into controller/store calls.
    """

    def __init__(
        self,
        controller: RoundController,
        settings_store: SettingsStore,
        stats_store: StatsStore,
    ):
        """Initialize the UI adapter.

        Args:
            controller: Round controller to drive
            settings_store: Store used for settings toggles
            stats_store: Store shown in the statistics view
        """
        self.controller = controller
        self.settings_store = settings_store
        self.stats_store = stats_store
        self.settings: SettingsRecord = settings_store.load()
        self.view = FeedbackView()
        self.prompt: Optional[str] = None
        # Index into DISPLAY_NOTES of the wheel segment picked with the keyboard
        self.focus_index: Optional[int] = None
        self._running = False
        self._bind_events()

    def _bind_events(self) -> None:
        events = self.controller.events
        events.on_round_started(self._on_round_started)
        events.on_guess_evaluated(self._on_guess_evaluated)
        events.on_error(self._on_error)

    def _unbind_events(self) -> None:
        events = self.controller.events
        events.off(RoundEventType.ROUND_STARTED, self._on_round_started)
        events.off(RoundEventType.GUESS_EVALUATED, self._on_guess_evaluated)
        events.off(RoundEventType.ERROR, self._on_error)

    @abstractmethod
    def initialize(self) -> bool:
        """Initialize the UI.

        Returns:
            True if initialization was successful, False otherwise
        """
        pass

    @abstractmethod
    def update(self, delta_time: float) -> bool:
        """Handle input and timers.

        Returns:
            True to continue running, False to exit
        """
        pass

    @abstractmethod
    def render(self) -> None:
        """Render the UI."""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """Clean up resources used by the UI."""
        pass

    def start(self) -> bool:
        """Initialize the UI and start the first round.

        Returns:
            True if started successfully, False otherwise
        """
        if self._running:
            logger.warning("UI already running")
            return True

        if not self.initialize():
            logger.error("Failed to initialize UI")
            return False

        self._bind_events()
        self._running = True
        self.start_round()
        logger.info("UI started")
        return True

    def stop(self) -> None:
        """Clean up and stop following the controller's events."""
        if not self._running:
            return
        self._unbind_events()
        self.cleanup()
        self._running = False
        logger.info("UI stopped")

    def is_running(self) -> bool:
        return self._running

    @property
    def session(self) -> SessionCounters:
        return self.controller.session

    @property
    def session_text(self) -> str:
        return f"{self.session.correct}/{self.session.total} ({self.controller.session_accuracy()}%)"

    def start_round(self) -> Optional[RoundState]:
        """Start a round with the current settings; None (and a prompt) if impossible."""
        try:
            return self.controller.new_round(self.settings)
        except InvalidConfiguration as e:
            self._on_error(e)
            return None

    def submit_guess(self, note: str) -> GuessResult:
        return self.controller.guess(note)

    def request_advance(self) -> bool:
        """Next button / Enter: only honoured after a wrong answer."""
        if not self.view.show_next:
            return False
        return self.start_round() is not None

    @property
    def focused_note(self) -> Optional[str]:
        return None if self.focus_index is None else DISPLAY_NOTES[self.focus_index]

    def move_focus(self, step: int) -> str:
        """Move the keyboard focus around the note wheel, wrapping at either end.

        The first move focuses the first segment (or the last, going backwards).

        Returns:
            The newly focused note
        """
        if self.focus_index is None:
            self.focus_index = 0 if step >= 0 else len(DISPLAY_NOTES) - 1
        else:
            self.focus_index = (self.focus_index + step) % len(DISPLAY_NOTES)
        return DISPLAY_NOTES[self.focus_index]

    def activate(self) -> bool:
        """Enter/Space: guess the focused note while a round awaits an answer, else Next."""
        state = self.controller.state
        if self.focus_index is not None and state is not None and not state.answered:
            return self.submit_guess(DISPLAY_NOTES[self.focus_index]).accepted
        return self.request_advance()

    def toggle_fret(self, index: int) -> bool:
        return self.settings_store.toggle(self.settings, SettingsDimension.FRETS, index)

    def toggle_string(self, index: int) -> bool:
        return self.settings_store.toggle(self.settings, SettingsDimension.STRINGS, index)

    def select_all(self, dimension: SettingsDimension) -> None:
        self.settings_store.select_all(self.settings, dimension)

    def select_none(self, dimension: SettingsDimension) -> None:
        self.settings_store.select_none(self.settings, dimension)

    def reset_settings(self) -> None:
        self.settings_store.reset_defaults(self.settings)

    def reset_progress(self) -> None:
        """Clear all-time stats and the session score."""
        self.stats_store.reset()
        self.controller.reset_session()

    def _on_round_started(self, state: RoundState) -> None:
        self.prompt = None
        self.view = FeedbackView(position=state.position)

    def _on_guess_evaluated(self, state: RoundState, result: GuessResult) -> None:
        self.view = FeedbackView(
            position=state.position,
            feedback="correct" if result.is_correct else "incorrect",
            guessed=result.guess,
            correct_answer=result.correct_answer,
            show_next=not result.is_correct,
        )

    def _on_error(self, error: Exception) -> None:
        logger.warning(f"Cannot start a round: {error}")
        self.prompt = NO_SELECTION_PROMPT
