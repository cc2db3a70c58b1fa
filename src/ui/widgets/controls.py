"""Control widgets: ChoiceBox (CHOICE / MULTI_CHOICE) and LevelSlider (LEVEL)."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Label, Static

from constants import LEVEL_MAX
from model import ControlKind, MixerControl

SLIDER_WIDTH = 50


class ChoiceBox(Static):
    """A row of member buttons for a CHOICE or MULTI_CHOICE control.

    The member under the cursor is marked "selected". For MULTI_CHOICE
    controls, members whose bits are set in the device mask are also
    marked "set".
    """

    def __init__(self, control: MixerControl) -> None:
        super().__init__(classes="control-widget choice-box")
        self.control = control
        self.border_title = control.name
        self._members = [
            Label(member.label, markup=False, classes="member") for member in control.members
        ]

    def compose(self) -> ComposeResult:
        yield Horizontal(*self._members, classes="member-row")

    def on_mount(self) -> None:
        self.sync_from_control()

    def sync_from_control(self) -> None:
        """Update member highlighting from the control's state."""
        active = set(self.control.active_members()) if self.control.kind == ControlKind.MULTI_CHOICE else set()
        for i, label in enumerate(self._members):
            label.set_class(i == self.control.selected, "selected")
            label.set_class(i in active, "set")


def render_slider(level: int, width: int = SLIDER_WIDTH) -> str:
    """Render a level as a horizontal bar: '#####-----  128'."""
    filled = round(level * width / LEVEL_MAX)
    return f"{'#' * filled}{'-' * (width - filled)} {level:>4}"


class LevelSlider(Static):
    """One channel of a LEVEL control."""

    def __init__(self, control: MixerControl, channel: int) -> None:
        super().__init__("", markup=False, classes="control-widget level-slider")
        self.control = control
        self.channel = channel
        self.border_title = f"{control.name} (channel {channel})"

    def on_mount(self) -> None:
        self.sync_from_control()

    def sync_from_control(self) -> None:
        """Redraw the bar from the control's level for this channel."""
        if not self.is_mounted:
            return
        level = self.control.levels[self.channel] if self.channel < len(self.control.levels) else 0
        self.update(render_slider(level))
        if self.control.num_channels > 1:
            self.border_subtitle = "unlocked" if self.control.chans_unlocked else "locked"
        elif self.control.units:
            self.border_subtitle = self.control.units
