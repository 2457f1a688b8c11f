import unittest

from fretboard_trainer.note_types import SettingsDimension, SettingsRecord
from fretboard_trainer.round_controller import RoundController
from fretboard_trainer.scheduler import LoopScheduler
from fretboard_trainer.settings import SettingsStore, default_settings
from fretboard_trainer.stats import StatsStore, empty_stats
from fretboard_trainer.storage import MemoryStorage
from fretboard_trainer.ui.adapters import NO_SELECTION_PROMPT, UIAdapter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FirstChoice:
    def choice(self, seq):
        return seq[0]


class HeadlessUI(UIAdapter):
    """Adapter without a screen, for driving the round flow in tests."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.cleaned_up = False

    def initialize(self):
        return True

    def update(self, delta_time):
        self.controller.scheduler.run_pending()
        return True

    def render(self):
        pass

    def cleanup(self):
        self.cleaned_up = True


class TestUIAdapter(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.storage = MemoryStorage()
        self.stats = StatsStore(self.storage)
        self.settings_store = SettingsStore(self.storage)
        self.controller = RoundController(
            self.stats, LoopScheduler(clock=self.clock), rng=FirstChoice()
        )
        self.ui = HeadlessUI(self.controller, self.settings_store, self.stats)

    def test_start_draws_first_round(self):
        self.assertTrue(self.ui.start())
        self.assertTrue(self.ui.is_running())
        self.assertEqual(self.ui.view.position, self.controller.state.position)
        self.assertIsNone(self.ui.view.feedback)
        self.assertEqual(self.ui.view.message, "")
        self.assertEqual(self.ui.session_text, "0/0 (0%)")

    def test_correct_answer_view(self):
        self.ui.start()
        self.ui.submit_guess("E")
        self.assertEqual(self.ui.view.feedback, "correct")
        self.assertEqual(self.ui.view.message, "Correct!")
        self.assertFalse(self.ui.view.show_next)
        # Next is not offered, so Enter does nothing
        self.assertFalse(self.ui.request_advance())

        self.clock.now = 0.8
        self.ui.update(0.8)
        self.assertIsNone(self.ui.view.feedback)
        self.assertEqual(self.ui.session_text, "1/1 (100%)")

    def test_wrong_answer_view(self):
        self.ui.start()
        self.ui.submit_guess("D")
        self.assertEqual(self.ui.view.feedback, "incorrect")
        self.assertEqual(self.ui.view.message, "Wrong! It was E")
        self.assertEqual(self.ui.view.guessed, "D")
        self.assertTrue(self.ui.view.show_next)

        self.assertTrue(self.ui.request_advance())
        self.assertIsNone(self.ui.view.feedback)
        self.assertFalse(self.ui.view.show_next)

    def test_settings_actions_write_through(self):
        self.ui.toggle_fret(0)
        self.ui.toggle_string(0)
        self.assertEqual(self.settings_store.load(), self.ui.settings)
        self.ui.select_none(SettingsDimension.FRETS)
        self.assertEqual(self.ui.settings.enabled_frets(), [0])
        self.assertFalse(self.ui.toggle_fret(0))
        self.ui.select_all(SettingsDimension.FRETS)
        self.ui.reset_settings()
        self.assertEqual(self.ui.settings, default_settings())

    def test_settings_changes_apply_to_next_round(self):
        self.ui.start()
        self.ui.select_none(SettingsDimension.STRINGS)
        self.ui.toggle_string(4)
        self.ui.toggle_string(0)
        self.ui.submit_guess("Z")
        self.ui.request_advance()
        self.assertEqual(self.controller.state.position.string, 4)

    def test_reset_progress_clears_stats_and_session(self):
        self.ui.start()
        self.ui.submit_guess("E")
        self.ui.reset_progress()
        self.assertEqual(self.stats.current, empty_stats())
        self.assertEqual(self.ui.session_text, "0/0 (0%)")

    def test_refuses_to_start_without_selection(self):
        self.ui.settings = SettingsRecord(frets=[False] * 13, strings=[True] * 6)
        self.assertTrue(self.ui.start())
        self.assertEqual(self.ui.prompt, NO_SELECTION_PROMPT)
        self.assertIsNone(self.controller.state)

        self.ui.settings.frets[2] = True
        self.assertIsNotNone(self.ui.start_round())
        self.assertIsNone(self.ui.prompt)

    def test_stop(self):
        self.ui.start()
        self.ui.stop()
        self.assertTrue(self.ui.cleaned_up)
        self.assertFalse(self.ui.is_running())

    def test_stopped_ui_ignores_controller_events(self):
        self.ui.start()
        self.ui.stop()
        view = self.ui.view
        self.controller.guess("D")
        self.controller.advance()
        self.assertIs(self.ui.view, view)

        # Starting again follows the controller once more, without double binding
        self.ui.start()
        seen = []
        self.controller.events.on_round_started(seen.append)
        self.controller.advance()
        self.assertEqual(self.ui.view.position, self.controller.state.position)
        self.assertEqual(len(seen), 1)

    def test_keyboard_focus_wraps_around_the_wheel(self):
        self.assertIsNone(self.ui.focused_note)
        self.assertEqual(self.ui.move_focus(1), "A")
        self.assertEqual(self.ui.move_focus(-1), "G#/Ab")
        self.assertEqual(self.ui.move_focus(1), "A")
        self.assertEqual(self.ui.move_focus(7), "E")
        self.assertEqual(self.ui.focused_note, "E")

        ui = HeadlessUI(self.controller, self.settings_store, self.stats)
        self.assertEqual(ui.move_focus(-1), "G#/Ab")

    def test_activate_guesses_focused_note(self):
        self.ui.start()
        for _ in range(8):
            self.ui.move_focus(1)
        self.assertEqual(self.ui.focused_note, "E")
        self.assertTrue(self.ui.activate())
        self.assertEqual(self.ui.view.feedback, "correct")
        # Answered and no Next button: nothing more to do
        self.assertFalse(self.ui.activate())
        self.assertEqual(self.ui.session_text, "1/1 (100%)")

    def test_activate_after_wrong_answer_advances(self):
        self.ui.start()
        self.ui.move_focus(1)
        self.assertTrue(self.ui.activate())
        self.assertEqual(self.ui.view.message, "Wrong! It was E")
        self.assertTrue(self.ui.activate())
        self.assertIsNone(self.ui.view.feedback)

    def test_activate_without_focus_only_advances(self):
        self.ui.start()
        self.assertFalse(self.ui.activate())
        self.assertIsNone(self.ui.view.feedback)
        self.assertEqual(self.ui.session_text, "0/0 (0%)")


if __name__ == "__main__":
    unittest.main()
