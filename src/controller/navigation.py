"""Keyboard focus traversal over classes, controls and channels.

Focus states
------------
    ClassSelect                 the class selector bar holds focus
    ControlFocus(index)         a CHOICE/MULTI_CHOICE control holds focus
    ChannelFocus(index, chan)   one channel slider of a LEVEL control holds focus

Each key press goes through Navigator.dispatch(), which computes exactly one
transition. Focus moves never recurse: moving past the last channel of a
control is a single step to the next control.

                 DOWN                     DOWN (last channel)
   ClassSelect ───────► Control/Channel ─────────────────► next control
        ▲  ◄──────────────────┘ UP at 0 / ESCAPE / DOWN past last
        │ LEFT/RIGHT: cycle class

The Navigator never touches widgets or the device directly. It drives a
ControlView (implemented by the Textual app, or a test double) and a
DeviceSync.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Protocol, Union

from controller.sync import DeviceSync
from model import Mixer, MixerClass, MixerControl
from viewport import Placement, Viewport

log = logging.getLogger(__name__)


class NavKey(Enum):
    """Navigation keys, after alias resolution (arrows, hjkl, enter)."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ESCAPE = "escape"
    TOGGLE_LOCK = "toggle_lock"


# Key names (as reported by the toolkit) -> NavKey
KEY_ALIASES: dict[str, NavKey] = {
    "up": NavKey.UP,
    "k": NavKey.UP,
    "down": NavKey.DOWN,
    "j": NavKey.DOWN,
    "enter": NavKey.DOWN,
    "left": NavKey.LEFT,
    "h": NavKey.LEFT,
    "right": NavKey.RIGHT,
    "l": NavKey.RIGHT,
    "escape": NavKey.ESCAPE,
    "u": NavKey.TOGGLE_LOCK,
}


@dataclass(frozen=True)
class ClassSelect:
    pass


@dataclass(frozen=True)
class ControlFocus:
    index: int


@dataclass(frozen=True)
class ChannelFocus:
    index: int
    channel: int


FocusState = Union[ClassSelect, ControlFocus, ChannelFocus]


class ControlView(Protocol):
    """Widget operations the navigator needs from the toolkit."""

    def build_class_widgets(self, mixer_class: MixerClass) -> None:
        """Create the widgets for every control of a class."""

    def destroy_class_widgets(self) -> None:
        """Remove the active class's widgets."""

    def place_widgets(self, placements: list[Placement]) -> None:
        """Hide every control widget, then show only `placements` at their rows."""

    def activate(self, state: FocusState) -> None:
        """Give input focus to the widget matching `state`."""

    def redraw(self, control: MixerControl, channels: Iterable[int] | None = None) -> None:
        """Redraw a control's widget (or only some LEVEL channel sliders)."""

    def show_class(self, index: int) -> None:
        """Move the class selector's cursor to `index`."""

    def quit(self) -> None:
        """Release toolkit resources and leave the program."""


@dataclass
class MixerContext:
    """All mutable navigation state, passed explicitly (no globals)."""

    mixer: Mixer
    viewport: Viewport
    class_index: int = 0
    state: FocusState = field(default_factory=ClassSelect)

    @property
    def mixer_class(self) -> MixerClass:
        return self.mixer.classes[self.class_index]

    @property
    def controls(self) -> list[MixerControl]:
        return self.mixer_class.controls

    @property
    def class_count(self) -> int:
        return len(self.mixer.classes)


class Navigator:
    """Focus-traversal state machine.

    Example usage:
        nav = Navigator(MixerContext(mixer, Viewport(height=24)), sync, view)
        nav.start()
        nav.dispatch(NavKey.DOWN)
    """

    def __init__(self, context: MixerContext, sync: DeviceSync, view: ControlView) -> None:
        self.context = context
        self.sync = sync
        self.view = view

    @property
    def state(self) -> FocusState:
        return self.context.state

    # =========================================================================
    # Entry points
    # =========================================================================

    def start(self) -> None:
        """Build the first class and focus its first control."""
        self._build_class()
        self.view.show_class(self.context.class_index)
        self.focus_control(0)

    def dispatch(self, key: NavKey) -> None:
        """Apply one key press to the current state."""
        state = self.context.state
        log.debug(f"dispatch {key.value} in {state}")
        if isinstance(state, ClassSelect):
            self._on_class_key(key)
        elif isinstance(state, ChannelFocus):
            self._on_channel_key(state, key)
        else:
            self._on_control_key(state, key)

    def dispatch_key(self, key_name: str) -> bool:
        """Dispatch a toolkit key name. Returns False for unmapped keys."""
        key = KEY_ALIASES.get(key_name)
        if key is None:
            return False
        self.dispatch(key)
        return True

    def jump_to_class(self, index: int) -> None:
        """Switch directly to class `index` and focus its first control."""
        if not 0 <= index < self.context.class_count:
            log.debug(f"Ignoring jump to class {index}")
            return
        self.view.destroy_class_widgets()
        self.context.class_index = index
        self._build_class()
        self.view.show_class(index)
        self.focus_control(0)

    def resize(self, height: int) -> None:
        """Rebuild the active class for a new terminal height."""
        log.info(f"Resize to height {height}")
        self.view.destroy_class_widgets()
        self.context.viewport.height = height
        self._build_class()
        self.view.show_class(self.context.class_index)
        self.focus_control(0)

    # =========================================================================
    # Focus transitions
    # =========================================================================

    def focus_class_select(self) -> None:
        self.context.state = ClassSelect()
        self.view.activate(self.context.state)

    def focus_control(self, index: int) -> None:
        """Move focus to control `index`, or back to the class selector when out of range.

        LEVEL controls are entered at their stored channel cursor.
        """
        controls = self.context.controls
        if index < 0 or index >= len(controls):
            self.focus_class_select()
            return

        control = controls[index]
        if control.is_level and not 0 <= control.current_chan < control.num_channels:
            control.current_chan = 0

        viewport = self.context.viewport
        scrolled = viewport.scroll_to(controls, index)
        # A control taller than the screen shows a window of channels that follows the cursor
        if scrolled or (control.is_level and viewport.overflows(control)):
            self._reposition()

        if self.sync.refresh(control):
            self.view.redraw(control)
        if control.is_level:
            self.context.state = ChannelFocus(index, control.current_chan)
        else:
            self.context.state = ControlFocus(index)
        self.view.activate(self.context.state)

    # =========================================================================
    # Per-state key handling
    # =========================================================================

    def _on_class_key(self, key: NavKey) -> None:
        if key == NavKey.ESCAPE:
            log.info("Quit from class selector")
            self.view.quit()
        elif key == NavKey.DOWN:
            self.focus_control(0)
        elif key in (NavKey.LEFT, NavKey.RIGHT):
            step = -1 if key == NavKey.LEFT else 1
            self._cycle_class(step)

    def _on_control_key(self, state: ControlFocus, key: NavKey) -> None:
        control = self.context.controls[state.index]
        if key == NavKey.UP:
            self.focus_control(state.index - 1)
        elif key == NavKey.DOWN:
            self.focus_control(state.index + 1)
        elif key == NavKey.ESCAPE:
            self.focus_class_select()
        elif key in (NavKey.LEFT, NavKey.RIGHT) and control.members:
            step = -1 if key == NavKey.LEFT else 1
            index = (control.selected + step) % len(control.members)
            if self.sync.select_member(control, index):
                self.view.redraw(control)

    def _on_channel_key(self, state: ChannelFocus, key: NavKey) -> None:
        control = self.context.controls[state.index]
        if key == NavKey.UP:
            if state.channel > 0:
                control.current_chan = state.channel - 1
                self.focus_control(state.index)
            else:
                control.current_chan = 0
                self.focus_control(state.index - 1)
        elif key == NavKey.DOWN:
            if state.channel < control.num_channels - 1:
                control.current_chan = state.channel + 1
                self.focus_control(state.index)
            else:
                control.current_chan = 0
                self.focus_control(state.index + 1)
        elif key in (NavKey.LEFT, NavKey.RIGHT):
            control.current_chan = state.channel
            direction = -1 if key == NavKey.LEFT else 1
            if self.sync.step_level(control, direction):
                channels = [state.channel] if control.chans_unlocked else range(control.num_channels)
                self.view.redraw(control, channels)
        elif key == NavKey.TOGGLE_LOCK:
            control.chans_unlocked = not control.chans_unlocked
            log.debug(f"{control.name}: channels {'unlocked' if control.chans_unlocked else 'locked'}")
            self.view.redraw(control)
        elif key == NavKey.ESCAPE:
            self.focus_class_select()

    # =========================================================================
    # Widget lifecycle
    # =========================================================================

    def _cycle_class(self, step: int) -> None:
        self.view.destroy_class_widgets()
        self.context.class_index = (self.context.class_index + step) % self.context.class_count
        self._build_class()
        self.view.show_class(self.context.class_index)
        self.focus_class_select()

    def _build_class(self) -> None:
        """Read the class's values, create its widgets and lay them out from the top."""
        mixer_class = self.context.mixer_class
        self.context.viewport.reset()
        self.sync.refresh_class(mixer_class)
        self.view.build_class_widgets(mixer_class)
        self._reposition()

    def _reposition(self) -> None:
        self.view.place_widgets(self.context.viewport.layout(self.context.controls))
