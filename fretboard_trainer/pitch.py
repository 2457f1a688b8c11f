"""Utility functions for working with fretboard positions and note names."""

from typing import Dict, List

from .note_types import Position

FRET_COUNT = 13  # Frets 0-12, 0 being the open string
STRING_COUNT = 6
FRET_MARKERS = [3, 5, 7, 9, 12]

# Semitone names, C-based
NOTE_NAMES: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]

# Labels the player chooses from, in note wheel order (clockwise from the top)
DISPLAY_NOTES: List[str] = [
    "A",
    "A#/Bb",
    "B",
    "C",
    "C#/Db",
    "D",
    "D#/Eb",
    "E",
    "F",
    "F#/Gb",
    "G",
    "G#/Ab",
]

_DISPLAY_BY_NAME: Dict[str, str] = {
    "C": "C",
    "C#": "C#/Db",
    "D": "D",
    "D#": "D#/Eb",
    "E": "E",
    "F": "F",
    "F#": "F#/Gb",
    "G": "G",
    "G#": "G#/Ab",
    "A": "A",
    "A#": "A#/Bb",
    "B": "B",
}

# Standard tuning, high E first: string 0 is drawn at the top of the fretboard
STRING_NAMES: List[str] = ["E", "B", "G", "D", "A", "E"]
OPEN_STRING_PITCH_CLASSES: List[int] = [4, 11, 7, 2, 9, 4]


def pitch_class_at(string_index: int, fret: int) -> int:
    """Get the pitch class sounded at a fretboard position.

    Args:
        string_index: String index (0 = high E ... 5 = low E)
        fret: Fret number, 0 for the open string

    Returns:
        int: Semitone index 0-11, where 0 is C

    Examples:
        >>> pitch_class_at(5, 5)  # Low E string, fifth fret
        9
    """
    return (OPEN_STRING_PITCH_CLASSES[string_index] + fret) % 12


def display_name(pitch_class: int) -> str:
    """Get the display label for a pitch class (e.g. 1 -> 'C#/Db')."""
    return _DISPLAY_BY_NAME[NOTE_NAMES[pitch_class % 12]]


def note_at_position(position: Position) -> str:
    """Get the display label of the note at a Position."""
    return display_name(pitch_class_at(position.string, position.fret))
