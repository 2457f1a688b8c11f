"""Layout math for the fretboard and the note wheel.

Kept free of pygame so it can be unit tested headless. Angles follow
screen coordinates (y grows downwards), so increasing angles run clockwise
and segment 0 of the wheel starts at 12 o'clock.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..note_types import Position
from ..pitch import DISPLAY_NOTES, FRET_COUNT, FRET_MARKERS, STRING_COUNT

Point = Tuple[float, float]
Rect = Tuple[float, float, float, float]

# Wheel proportions, in wheel units (outer radius = 100)
WHEEL_RADIUS = 100
INNER_RADIUS = 35
LABEL_RADIUS = 67

SEGMENT_ANGLE = 360 / len(DISPLAY_NOTES)


def _polar(center: Point, radius: float, degrees: float) -> Point:
    rad = math.radians(degrees)
    return (center[0] + math.cos(rad) * radius, center[1] + math.sin(rad) * radius)


def segment_polygon(
    index: int,
    center: Point,
    inner_radius: float,
    outer_radius: float,
    steps: int = 8,
) -> List[Point]:
    """Outline of one wheel segment as a polygon.

    The outer arc is walked clockwise, then the inner arc back.
    """
    start = index * SEGMENT_ANGLE - 90
    end = (index + 1) * SEGMENT_ANGLE - 90
    outer = [_polar(center, outer_radius, start + (end - start) * i / steps) for i in range(steps + 1)]
    inner = [_polar(center, inner_radius, end - (end - start) * i / steps) for i in range(steps + 1)]
    return outer + inner


def label_position(index: int, center: Point, radius: float) -> Point:
    """Middle of a segment at the given radius."""
    return _polar(center, radius, index * SEGMENT_ANGLE + SEGMENT_ANGLE / 2 - 90)


def segment_at(point: Point, center: Point, inner_radius: float, outer_radius: float) -> Optional[int]:
    """Index of the wheel segment under point, or None outside the ring."""
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    distance = math.hypot(dx, dy)
    if distance < inner_radius or distance > outer_radius:
        return None
    angle = (math.degrees(math.atan2(dy, dx)) + 90) % 360
    return int(angle // SEGMENT_ANGLE) % len(DISPLAY_NOTES)


def note_at_point(point: Point, center: Point, inner_radius: float, outer_radius: float) -> Optional[str]:
    index = segment_at(point, center, inner_radius, outer_radius)
    return DISPLAY_NOTES[index] if index is not None else None


@dataclass
class FretboardLayout:
    """Grid of the fretboard: column 0 is the nut (open strings), 1-12 the frets."""

    x: float
    y: float
    width: float
    height: float
    nut_width: float = 40

    @property
    def fret_width(self) -> float:
        return (self.width - self.nut_width) / (FRET_COUNT - 1)

    @property
    def row_height(self) -> float:
        return self.height / STRING_COUNT

    def cell_rect(self, string: int, fret: int) -> Rect:
        """Area belonging to one position; fret 0 is the nut column."""
        top = self.y + string * self.row_height
        if fret == 0:
            return (self.x, top, self.nut_width, self.row_height)
        left = self.x + self.nut_width + (fret - 1) * self.fret_width
        return (left, top, self.fret_width, self.row_height)

    def dot_center(self, position: Position) -> Point:
        left, top, w, h = self.cell_rect(position.string, position.fret)
        return (left + w / 2, top + h / 2)

    def string_y(self, string: int) -> float:
        return self.y + (string + 0.5) * self.row_height

    def fret_line_x(self, fret: int) -> float:
        """Right-hand edge of a fret's column (fret 0 is the nut)."""
        return self.x + self.nut_width + fret * self.fret_width

    def fret_number_position(self, fret: int) -> Point:
        left, _, w, _ = self.cell_rect(0, fret)
        return (left + w / 2, self.y - 14)

    def marker_centers(self) -> List[Point]:
        """Inlay dots: one per marked fret, two at the octave."""
        centers = []
        for fret in FRET_MARKERS:
            left, _, w, _ = self.cell_rect(0, fret)
            cx = left + w / 2
            if fret == 12:
                centers.append((cx, self.y + self.height / 3))
                centers.append((cx, self.y + self.height * 2 / 3))
            else:
                centers.append((cx, self.y + self.height / 2))
        return centers

