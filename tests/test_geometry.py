import math
import unittest

from fretboard_trainer.note_types import Position
from fretboard_trainer.ui import geometry

CENTER = (200.0, 200.0)


class TestNoteWheel(unittest.TestCase):
    def test_segment_zero_is_at_the_top(self):
        self.assertEqual(geometry.segment_at((201, 120), CENTER, 35, 100), 0)
        self.assertEqual(geometry.note_at_point((201, 120), CENTER, 35, 100), "A")

    def test_segments_run_clockwise(self):
        # Just below 3 o'clock is segment 3 (C), just below 9 o'clock is 8 (F)
        self.assertEqual(geometry.note_at_point((280, 201), CENTER, 35, 100), "C")
        self.assertEqual(geometry.note_at_point((120, 201), CENTER, 35, 100), "F")
        # Just left of 12 o'clock is the last segment
        self.assertEqual(geometry.note_at_point((199, 120), CENTER, 35, 100), "G#/Ab")

    def test_outside_the_ring(self):
        self.assertIsNone(geometry.segment_at(CENTER, CENTER, 35, 100))
        self.assertIsNone(geometry.segment_at((200, 50), CENTER, 35, 100))

    def test_labels_hit_their_own_segment(self):
        for index in range(12):
            point = geometry.label_position(index, CENTER, geometry.LABEL_RADIUS)
            self.assertEqual(geometry.segment_at(point, CENTER, 35, 100), index)

    def test_polygon_lies_on_the_ring(self):
        points = geometry.segment_polygon(4, CENTER, 35, 100, steps=4)
        self.assertEqual(len(points), 10)
        radii = [math.hypot(x - CENTER[0], y - CENTER[1]) for x, y in points]
        for r in radii[:5]:
            self.assertAlmostEqual(r, 100)
        for r in radii[5:]:
            self.assertAlmostEqual(r, 35)


class TestFretboardLayout(unittest.TestCase):
    def setUp(self):
        self.layout = geometry.FretboardLayout(x=40, y=100, width=640, height=240, nut_width=40)

    def test_cells(self):
        self.assertEqual(self.layout.fret_width, 50)
        self.assertEqual(self.layout.row_height, 40)
        self.assertEqual(self.layout.cell_rect(0, 0), (40, 100, 40, 40))
        self.assertEqual(self.layout.cell_rect(5, 1), (80, 300, 50, 40))
        self.assertEqual(self.layout.cell_rect(2, 12), (630, 180, 50, 40))

    def test_dot_sits_on_its_string(self):
        center = self.layout.dot_center(Position(string=3, fret=5))
        self.assertEqual(center, (305, 240))
        self.assertEqual(center[1], self.layout.string_y(3))

    def test_markers(self):
        centers = self.layout.marker_centers()
        self.assertEqual(len(centers), 6)
        # Octave marker is doubled
        self.assertEqual(centers[-1][0], centers[-2][0])


if __name__ == "__main__":
    unittest.main()
