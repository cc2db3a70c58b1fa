"""Custom Textual widgets for mixtui."""

from ui.widgets.classes import ClassBar
from ui.widgets.controls import ChoiceBox, LevelSlider, render_slider

__all__ = [
    "ClassBar",
    "ChoiceBox",
    "LevelSlider",
    "render_slider",
]
