"""UI helper functions for mixtui."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from textual.widget import Widget

from model import MixerClass
from ui.widgets import ChoiceBox, LevelSlider

if TYPE_CHECKING:
    from viewport import Placement

log = logging.getLogger(__name__)

# (control index, channel or None) -> widget
WidgetKey = tuple[int, "int | None"]


def create_class_widgets(mixer_class: MixerClass) -> dict[WidgetKey, Widget]:
    """Create one widget per CHOICE/MULTI_CHOICE control and per LEVEL channel.

    Widgets start hidden; place_widgets() decides which are shown. The dict
    preserves control order, which is also the on-screen order.
    """
    widgets: dict[WidgetKey, Widget] = {}
    for i, control in enumerate(mixer_class.controls):
        if control.is_level:
            for chan in range(control.num_channels):
                widgets[(i, chan)] = LevelSlider(control, chan)
        else:
            widgets[(i, None)] = ChoiceBox(control)
    for widget in widgets.values():
        widget.display = False
    return widgets


def place_widgets(widgets: dict[WidgetKey, Widget], placements: list[Placement]) -> None:
    """Hide every widget, then show the placed ones.

    The hide pass always runs first so that no widget is shown at a stale
    position while others move.
    """
    for widget in widgets.values():
        widget.display = False

    for placement in placements:
        widget = widgets.get((placement.index, placement.channel))
        if widget is None:
            log.debug(f"No widget for placement {placement}")
            continue
        widget.display = True
