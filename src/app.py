"""Main TUI application for mixtui."""

import logging
import os
from pathlib import Path
from typing import Iterable

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widget import Widget
from textual.widgets import Label, Static

from constants import MAX_CLASSES
from controller import (
    ChannelFocus,
    ClassSelect,
    ControlFocus,
    DeviceSync,
    FocusState,
    MixerContext,
    Navigator,
)
from controller.sync import ControlTransport
from model import Mixer, MixerClass, MixerControl
from ui import ClassBar, create_class_widgets, place_widgets
from ui.helpers import WidgetKey
from ui.ids import css
from viewport import Placement, Viewport
import ui.ids as ids

# Set up logging to XDG state directory
def _get_log_path() -> Path:
    """Get the log file path using XDG Base Directory spec."""
    xdg_state = os.environ.get("XDG_STATE_HOME", str(Path.home() / ".local" / "state"))
    log_dir = Path(xdg_state) / "mixtui"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "mixtui.log"

logging.basicConfig(
    filename=str(_get_log_path()),
    level=logging.DEBUG,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
log = logging.getLogger(__name__)

APP_CSS = (Path(__file__).parent / "ui" / "styles.css").read_text()

NAV_KEYS = ["up", "down", "left", "right", "h", "j", "k", "l", "enter", "escape", "u"]


def _nav_bindings() -> list[Binding]:
    bindings = [
        Binding(key, f"nav('{key}')", key, show=False, priority=True)
        for key in NAV_KEYS
    ]
    bindings += [
        Binding(f"f{n}", f"jump_class({n - 1})", f"Class {n}", show=False, priority=True)
        for n in range(1, MAX_CLASSES + 1)
    ]
    return bindings


class MixerTUI(App):
    """TUI for browsing and adjusting mixer controls.

    Implements the ControlView protocol: the Navigator decides what has
    focus and what is visible, this class turns that into widgets.
    """

    TITLE = "Audio Mixer"
    ENABLE_COMMAND_PALETTE = False
    CSS = APP_CSS

    BINDINGS = _nav_bindings()

    def __init__(self, mixer: Mixer, transport: ControlTransport, device_path: str = "") -> None:
        super().__init__()
        self.mixer = mixer
        self.device_path = device_path
        self.sync = DeviceSync(transport, on_error=self._set_status)
        self.context = MixerContext(mixer=mixer, viewport=Viewport(height=24))
        self.navigator = Navigator(self.context, self.sync, self)
        self._widgets: dict[WidgetKey, Widget] = {}
        self._active: Widget | None = None
        self._last_size: tuple[int, int] | None = None

    def compose(self) -> ComposeResult:
        log.info(f"compose() called for {self.device_path or 'mixer'}")
        yield Horizontal(
            ClassBar(self.mixer.class_names, id=ids.CLASS_BAR),
            Label(self.TITLE, id=ids.HEADER_TITLE),
            id=ids.HEADER_CONTAINER,
        )
        yield Label("Controls", id=ids.CONTROLS_HEADING)
        yield Vertical(id=ids.CONTROLS_PANEL)
        yield Static("", id=ids.STATUS_BAR, markup=False)

    # =========================================================================
    # Status
    # =========================================================================

    def _set_status(self, message: str) -> None:
        """Set status bar message."""
        try:
            status = self.query_one(css(ids.STATUS_BAR), Static)
            status.update(message)
        except NoMatches:
            pass

    # =========================================================================
    # Key handling
    # =========================================================================

    def action_nav(self, key: str) -> None:
        """Feed a navigation key to the state machine."""
        self._set_status("")
        self.navigator.dispatch_key(key)

    def action_jump_class(self, index: int) -> None:
        """Jump to a class by position (F1 = first class)."""
        self.navigator.jump_to_class(index)

    # =========================================================================
    # ControlView
    # =========================================================================

    def build_class_widgets(self, mixer_class: MixerClass) -> None:
        self._widgets = create_class_widgets(mixer_class)
        self._active = None
        if self._widgets:
            self.query_one(css(ids.CONTROLS_PANEL)).mount(*self._widgets.values())

    def destroy_class_widgets(self) -> None:
        for widget in self._widgets.values():
            widget.remove()
        self._widgets = {}
        self._active = None

    def place_widgets(self, placements: list[Placement]) -> None:
        place_widgets(self._widgets, placements)

    def activate(self, state: FocusState) -> None:
        if self._active is not None:
            self._active.remove_class("focused")
        class_bar = self.query_one(css(ids.CLASS_BAR), ClassBar)
        class_bar.set_class(isinstance(state, ClassSelect), "focused")

        widget: Widget | None = None
        if isinstance(state, ChannelFocus):
            widget = self._widgets.get((state.index, state.channel))
        elif isinstance(state, ControlFocus):
            widget = self._widgets.get((state.index, None))
        if widget is not None:
            widget.add_class("focused")
        self._active = widget

    def redraw(self, control: MixerControl, channels: Iterable[int] | None = None) -> None:
        index = self.context.controls.index(control)
        if control.is_level:
            targets = range(control.num_channels) if channels is None else channels
            keys = [(index, chan) for chan in targets]
        else:
            keys = [(index, None)]
        for key in keys:
            widget = self._widgets.get(key)
            if widget is not None:
                widget.sync_from_control()

    def show_class(self, index: int) -> None:
        self.query_one(css(ids.CLASS_BAR), ClassBar).select(index)

    def quit(self) -> None:
        self.destroy_class_widgets()
        self.exit(return_code=0)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self._last_size = (self.size.width, self.size.height)
        self.context.viewport.height = self.size.height
        self.navigator.start()

    def on_resize(self, event: events.Resize) -> None:
        """Rebuild the active class when the terminal size changes."""
        size = (event.size.width, event.size.height)
        if self._last_size is None or size == self._last_size:
            return
        self._last_size = size
        self.navigator.resize(event.size.height)
