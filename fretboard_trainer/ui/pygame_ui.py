import time
from typing import Callable, List, Optional, Tuple

import pygame

from ..logger import get_logger
from ..note_types import SettingsDimension
from ..pitch import DISPLAY_NOTES, FRET_COUNT, STRING_COUNT, STRING_NAMES
from ..round_controller import RoundController
from ..settings import SettingsStore
from ..stats import StatsStore, fret_rows, note_rows
from . import geometry
from .adapters import UIAdapter

# Get logger for this module
logger = get_logger(__name__)

BAND_COLORS = {
    "good": (76, 175, 80),
    "medium": (255, 193, 7),
    "poor": (244, 67, 54),
}


class PygameUI(UIAdapter):
    """Pygame window: fretboard on top, note wheel below, overlays for stats and settings."""

    def __init__(
        self,
        controller: RoundController,
        settings_store: SettingsStore,
        stats_store: StatsStore,
        width: int = 1024,
        height: int = 768,
        fps: int = 30,
    ):
        super().__init__(controller, settings_store, stats_store)
        self.screen = None
        self.width = width
        self.height = height
        self.fps = fps
        self.bg_color = (20, 20, 30)
        self.text_color = (255, 255, 255)
        self.muted_color = (150, 150, 170)
        self.board_color = (92, 64, 51)
        self.string_color = (210, 210, 210)
        self.button_color = (0, 122, 255)
        self.correct_color = (76, 175, 80)
        self.incorrect_color = (244, 67, 54)
        self.clock = None

        # Fonts
        self.title_font = None
        self.medium_font = None
        self.small_font = None

        self.overlay: Optional[str] = None  # 'stats', 'settings' or None
        self._confirming: Optional[str] = None
        self._buttons: List[Tuple[pygame.Rect, Callable[[], None]]] = []

        self.fretboard = geometry.FretboardLayout(x=80, y=110, width=width - 160, height=240)
        self.wheel_center = (width / 2, height - 210)
        self.wheel_scale = 1.6

        logger.debug("Initializing PygameUI")

    @property
    def wheel_outer(self) -> float:
        return geometry.WHEEL_RADIUS * self.wheel_scale

    @property
    def wheel_inner(self) -> float:
        return geometry.INNER_RADIUS * self.wheel_scale

    def initialize(self) -> bool:
        """Initialize the Pygame screen and resources"""
        try:
            pygame.init()
            self.screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption("Fretboard Trainer")

            self.title_font = pygame.font.SysFont("Arial", 36, bold=True)
            self.medium_font = pygame.font.SysFont("Arial", 24)
            self.small_font = pygame.font.SysFont("Arial", 18)

            self.clock = pygame.time.Clock()
            logger.info("Pygame UI initialized successfully")
            return True
        except pygame.error as e:
            logger.error(f"Failed to initialize Pygame: {e}")
            pygame.quit()
            return False

    def run(self) -> None:
        """Run the main loop until the window is closed."""
        if not self.start():
            return
        last = time.perf_counter()
        try:
            while self.is_running():
                now = time.perf_counter()
                if not self.update(now - last):
                    break
                last = now
                self.render()
                self.clock.tick(self.fps)
        finally:
            self.stop()

    def update(self, delta_time: float) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos)

        # Fires the pending auto-advance, if it is due
        self.controller.scheduler.run_pending()
        return True

    def _handle_key(self, key) -> None:
        if key in (pygame.K_RETURN, pygame.K_SPACE, pygame.K_KP_ENTER):
            if self.overlay is None:
                self.activate()
        elif key in (pygame.K_RIGHT, pygame.K_DOWN):
            if self.overlay is None:
                self.move_focus(1)
        elif key in (pygame.K_LEFT, pygame.K_UP):
            if self.overlay is None:
                self.move_focus(-1)
        elif key == pygame.K_ESCAPE:
            self.close_overlay()
        elif key == pygame.K_s:
            self.open_overlay("stats")
        elif key == pygame.K_o:
            self.open_overlay("settings")

    def _handle_click(self, pos) -> None:
        for rect, action in self._buttons:
            if rect.collidepoint(pos):
                action()
                return
        if self.overlay is None:
            note = geometry.note_at_point(pos, self.wheel_center, self.wheel_inner, self.wheel_outer)
            if note is not None:
                self.submit_guess(note)
        self._confirming = None

    def open_overlay(self, name: str) -> None:
        self.overlay = name
        self._confirming = None

    def close_overlay(self) -> None:
        self.overlay = None
        self._confirming = None
        if self.prompt:
            # Settings may have been fixed while the overlay was open
            self.start_round()

    def _confirm(self, name: str, action: Callable[[], None]) -> Callable[[], None]:
        """Wrap a destructive action so that it needs a second click."""

        def handler():
            if self._confirming == name:
                self._confirming = None
                action()
            else:
                self._confirming = name

        return handler

    # Drawing

    def _text(self, font, text: str, color, **anchor) -> pygame.Rect:
        surface = font.render(text, True, color)
        rect = surface.get_rect(**anchor)
        self.screen.blit(surface, rect)
        return rect

    def _button(self, text: str, rect: Tuple[float, float, float, float], action: Callable[[], None], active: bool = False) -> None:
        r = pygame.Rect(rect)
        if active or r.collidepoint(pygame.mouse.get_pos()):
            pygame.draw.rect(self.screen, self.button_color, r, border_radius=6)
        else:
            pygame.draw.rect(self.screen, self.button_color, r, 2, border_radius=6)
        self._text(self.small_font, text, self.text_color, center=r.center)
        self._buttons.append((r, action))

    def render(self) -> None:
        if self.screen is None:
            return
        self._buttons = []
        self.screen.fill(self.bg_color)

        if self.overlay == "stats":
            self._render_stats()
        elif self.overlay == "settings":
            self._render_settings()
        else:
            self._render_quiz()

        pygame.display.flip()

    def _render_quiz(self) -> None:
        self._text(self.title_font, "Fretboard Trainer", self.text_color, midtop=(self.width / 2, 16))
        self._text(self.medium_font, self.session_text, self.muted_color, topright=(self.width - 20, 24))
        self._button("Stats", (20, 20, 90, 36), lambda: self.open_overlay("stats"))
        self._button("Settings", (120, 20, 110, 36), lambda: self.open_overlay("settings"))

        self._render_fretboard()

        if self.prompt:
            self._text(self.medium_font, self.prompt, self.incorrect_color, center=(self.width / 2, 390))
            return

        color = self.correct_color if self.view.feedback == "correct" else self.incorrect_color
        if self.view.message:
            self._text(self.medium_font, self.view.message, color, center=(self.width / 2, 390))

        self._render_wheel()

        if self.view.show_next:
            self._button("Next", (self.width - 220, self.wheel_center[1] - 25, 160, 50), self.request_advance)

    def _render_fretboard(self) -> None:
        board = self.fretboard
        pygame.draw.rect(self.screen, self.board_color, (board.x, board.y, board.width, board.height))

        for center in board.marker_centers():
            pygame.draw.circle(self.screen, (230, 220, 200), center, 8)

        nut_x = board.fret_line_x(0)
        pygame.draw.line(self.screen, (240, 240, 230), (nut_x, board.y), (nut_x, board.y + board.height), 6)
        for fret in range(1, FRET_COUNT):
            x = board.fret_line_x(fret)
            pygame.draw.line(self.screen, (180, 180, 180), (x, board.y), (x, board.y + board.height), 2)
            self._text(self.small_font, str(fret), self.muted_color, center=board.fret_number_position(fret))

        for string in range(STRING_COUNT):
            y = board.string_y(string)
            # Lower strings are drawn thicker
            pygame.draw.line(self.screen, self.string_color, (board.x, y), (board.x + board.width, y), 1 + string // 2)

        if self.view.position is not None:
            if self.view.feedback == "correct":
                color = self.correct_color
            elif self.view.feedback == "incorrect":
                color = self.incorrect_color
            else:
                color = self.button_color
            pygame.draw.circle(self.screen, color, board.dot_center(self.view.position), 14)

    def _render_wheel(self) -> None:
        answered = self.view.feedback is not None
        hovered = None
        if not answered:
            hovered = geometry.note_at_point(
                pygame.mouse.get_pos(), self.wheel_center, self.wheel_inner, self.wheel_outer
            )

        for index, note in enumerate(DISPLAY_NOTES):
            if answered and note == self.view.correct_answer:
                fill = self.correct_color
            elif answered and note == self.view.guessed and self.view.feedback == "incorrect":
                fill = self.incorrect_color
            elif answered:
                fill = (35, 35, 45)
            elif note == hovered:
                fill = (70, 70, 110)
            else:
                fill = (45, 45, 70)

            points = geometry.segment_polygon(index, self.wheel_center, self.wheel_inner, self.wheel_outer)
            pygame.draw.polygon(self.screen, fill, points)
            pygame.draw.polygon(self.screen, self.bg_color, points, 2)
            if not answered and note == self.focused_note:
                pygame.draw.polygon(self.screen, self.text_color, points, 3)

            label_color = self.muted_color if answered and fill == (35, 35, 45) else self.text_color
            label = geometry.label_position(index, self.wheel_center, geometry.LABEL_RADIUS * self.wheel_scale)
            self._text(self.small_font, note, label_color, center=label)

    def _render_bar_rows(self, title: str, rows, left: float, top: float) -> None:
        self._text(self.medium_font, title, self.text_color, topleft=(left, top))
        y = top + 36
        for row in rows:
            self._text(self.small_font, row.label, self.text_color, midleft=(left, y + 9))
            bar = pygame.Rect(left + 80, y, 240, 18)
            pygame.draw.rect(self.screen, (50, 50, 60), bar)
            if row.band is not None:
                fill = bar.copy()
                fill.width = int(bar.width * row.accuracy / 100)
                pygame.draw.rect(self.screen, BAND_COLORS[row.band], fill)
            self._text(self.small_font, row.value_text, self.muted_color, midleft=(bar.right + 10, y + 9))
            y += 26

    def _render_stats(self) -> None:
        record = self.stats_store.current
        self._text(self.title_font, "Statistics", self.text_color, midtop=(self.width / 2, 16))
        self._text(
            self.medium_font,
            f"Attempts: {record.total_attempts}    Accuracy: {record.accuracy}%",
            self.muted_color,
            midtop=(self.width / 2, 64),
        )
        self._render_bar_rows("By note", note_rows(record), 80, 110)
        self._render_bar_rows("By fret", fret_rows(record), self.width / 2 + 40, 110)

        label = "Click again to reset" if self._confirming == "progress" else "Reset progress"
        self._button(label, (self.width / 2 - 230, self.height - 70, 220, 44), self._confirm("progress", self.reset_progress))
        self._button("Close", (self.width / 2 + 10, self.height - 70, 220, 44), self.close_overlay)

    def _render_toggle_row(self, title: str, labels: List[str], mask: List[bool], dimension: SettingsDimension, top: float) -> None:
        self._text(self.medium_font, title, self.text_color, topleft=(80, top))
        self._button("All", (self.width - 260, top, 80, 32), lambda: self.select_all(dimension))
        self._button("None", (self.width - 170, top, 80, 32), lambda: self.select_none(dimension))

        toggle = self.toggle_fret if dimension is SettingsDimension.FRETS else self.toggle_string
        x = 80
        for index, label in enumerate(labels):
            self._button(label, (x, top + 44, 56, 40), lambda i=index: toggle(i), active=mask[index])
            x += 64

    def _render_settings(self) -> None:
        self._text(self.title_font, "Settings", self.text_color, midtop=(self.width / 2, 16))
        fret_labels = ["Open"] + [str(f) for f in range(1, FRET_COUNT)]
        string_labels = [f"{i + 1} {name}" for i, name in enumerate(STRING_NAMES)]
        self._render_toggle_row("Frets", fret_labels, self.settings.frets, SettingsDimension.FRETS, 90)
        self._render_toggle_row("Strings", string_labels, self.settings.strings, SettingsDimension.STRINGS, 230)

        label = "Click again to reset" if self._confirming == "settings" else "Reset settings"
        self._button(label, (self.width / 2 - 230, self.height - 70, 220, 44), self._confirm("settings", self.reset_settings))
        self._button("Close", (self.width / 2 + 10, self.height - 70, 220, 44), self.close_overlay)

    def cleanup(self) -> None:
        """Clean up Pygame resources"""
        if self.screen is not None:
            logger.info("Cleaning up Pygame UI")
            pygame.quit()
            self.screen = None
