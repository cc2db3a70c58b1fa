"""UI module containing widgets, styles, and layout helpers."""

from ui.widgets import ChoiceBox, ClassBar, LevelSlider, render_slider
from ui.helpers import create_class_widgets, place_widgets
from ui import ids

__all__ = [
    # Widgets
    "ChoiceBox",
    "ClassBar",
    "LevelSlider",
    "render_slider",
    # Helpers
    "create_class_widgets",
    "place_widgets",
]
