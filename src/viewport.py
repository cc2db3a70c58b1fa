"""Viewport: which controls of a class fit on screen, and where."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from constants import FOOTER_MARGIN, HEADER_ROWS, ROWS_PER_WIDGET
from model import MixerControl

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """Screen position of one control widget (or one channel of a LEVEL control)."""

    index: int
    channel: int | None
    row: int


@dataclass
class Viewport:
    """A scroll offset over a class's control list, bounded by terminal height.

    Widgets start below a fixed header. Each CHOICE/MULTI_CHOICE control takes
    ROWS_PER_WIDGET rows and each LEVEL channel takes as many. A control is
    visible if it is reached from `top` before the running row total hits the
    usable limit (height - FOOTER_MARGIN).
    """

    height: int
    top: int = 0

    @property
    def limit(self) -> int:
        return self.height - FOOTER_MARGIN

    @staticmethod
    def control_rows(control: MixerControl) -> int:
        return ROWS_PER_WIDGET * control.row_count

    def within_bounds(self, controls: Sequence[MixerControl], index: int) -> bool:
        """Check whether controls[index] is visible at the current offset."""
        if index < self.top:
            return False
        y = HEADER_ROWS
        for i in range(self.top, len(controls)):
            y += self.control_rows(controls[i])
            if y >= self.limit:
                return False
            if i == index:
                break
        return True

    def overflows(self, control: MixerControl) -> bool:
        """True if `control` alone is taller than the usable rows."""
        return HEADER_ROWS + self.control_rows(control) >= self.limit

    def channel_window(self, control: MixerControl) -> range:
        """Channels of a LEVEL control that are drawn.

        All of them, unless the control overflows the screen on its own; then
        as many as fit, shifted so that the control's current channel is
        among them.
        """
        if not self.overflows(control):
            return range(control.num_channels)
        fit = max(1, (self.limit - HEADER_ROWS - 1) // ROWS_PER_WIDGET)
        start = max(0, control.current_chan - fit + 1)
        start = min(start, control.num_channels - fit)
        return range(start, start + fit)

    def visible_range(self, controls: Sequence[MixerControl]) -> range:
        """Indices of the controls shown from `top` (stops at the first that doesn't fit).

        The control at `top` is always shown, clipped if it doesn't fit.
        """
        y = HEADER_ROWS
        last = self.top
        for i in range(self.top, len(controls)):
            y += self.control_rows(controls[i])
            if y >= self.limit and i > self.top:
                break
            last = i + 1
            if y >= self.limit:
                break
        return range(self.top, last)

    def layout(self, controls: Sequence[MixerControl]) -> list[Placement]:
        """Assign a screen row to every visible widget."""
        placements = []
        y = HEADER_ROWS
        for i in self.visible_range(controls):
            control = controls[i]
            if control.is_level:
                for chan in self.channel_window(control):
                    placements.append(Placement(i, chan, y))
                    y += ROWS_PER_WIDGET
            else:
                placements.append(Placement(i, None, y))
                y += ROWS_PER_WIDGET
        return placements

    def scroll_to(self, controls: Sequence[MixerControl], index: int) -> bool:
        """Adjust `top` so controls[index] is visible.

        Scrolling up jumps straight to `index`; scrolling down advances one
        control at a time until `index` fits (and never past it).

        Returns:
            True if the offset changed
        """
        old_top = self.top
        if index < self.top:
            self.top = index
        elif index > self.top:
            while self.top < index and not self.within_bounds(controls, index):
                self.top += 1
        if self.top != old_top:
            log.debug(f"Viewport scrolled {old_top} -> {self.top} for control {index}")
            return True
        return False

    def reset(self) -> None:
        self.top = 0
