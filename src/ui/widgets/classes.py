"""Class selector bar."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Label, Static


class ClassBar(Static):
    """One button per mixer class; the current class is marked "selected"."""

    def __init__(self, names: list[str], **kwargs) -> None:
        super().__init__(**kwargs)
        self.border_title = "Classes"
        self._buttons = [
            Label(f"F{i + 1} {name}", markup=False, classes="class-button")
            for i, name in enumerate(names)
        ]
        self.current = 0

    def compose(self) -> ComposeResult:
        yield Horizontal(*self._buttons, classes="class-row")

    def on_mount(self) -> None:
        self.select(self.current)

    def select(self, index: int) -> None:
        self.current = index
        for i, button in enumerate(self._buttons):
            button.set_class(i == index, "selected")
