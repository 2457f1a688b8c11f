"""User interfaces for the fretboard trainer.

The pygame front end lives in ui.pygame_ui and is imported on demand so the
adapter and layout code work without a display.
"""

from .adapters import FeedbackView, UIAdapter

__all__ = ["FeedbackView", "UIAdapter"]
