"""DeviceSync: keeps control state and the mixer device in step."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from constants import LEVEL_MAX, LEVEL_MIN
from device.errors import MixerIOError
from model import ControlKind, MixerClass, MixerControl

log = logging.getLogger(__name__)


class ControlTransport(Protocol):
    """Read/write side of a mixer device."""

    def read(self, device_id: int, kind: ControlKind, num_channels: int = 0) -> int | list[int]: ...

    def write(self, device_id: int, kind: ControlKind, value: int | list[int]) -> None: ...


def clamp_level(level: int) -> int:
    """Clamp a level to the device scale."""
    return max(LEVEL_MIN, min(LEVEL_MAX, level))


class DeviceSync:
    """Reads device values into controls and writes edits back.

    1. **Device → model** (refresh): called on every focus entry so that what
       is displayed matches the hardware at that moment.

    2. **Model → device** (select_member, set_level, step_level): called on
       every edit. The control's state only changes once the write succeeds.

    Failures never raise: they are logged, passed to `on_error` (the app
    shows them in its status bar) and the method returns False. Nothing is
    retried.

    Example usage:
        sync = DeviceSync(device, on_error=app.set_status)
        sync.refresh(control)
        sync.step_level(control, +1)
    """

    def __init__(self, transport: ControlTransport, on_error: Callable[[str], None] | None = None) -> None:
        self.transport = transport
        self.on_error = on_error

    def _report(self, error: MixerIOError) -> None:
        log.error(f"mixer: {error}")
        if self.on_error is not None:
            self.on_error(str(error))

    # =========================================================================
    # Device → model
    # =========================================================================

    def refresh(self, control: MixerControl) -> bool:
        """Read the control's current value(s) from the device."""
        try:
            value = self.transport.read(control.device_id, control.kind, control.num_channels)
        except MixerIOError as e:
            self._report(e)
            return False

        if control.kind == ControlKind.LEVEL:
            levels = [clamp_level(v) for v in list(value)[: control.num_channels]]  # type: ignore[arg-type]
            levels += [0] * (control.num_channels - len(levels))
            control.levels = levels
        else:
            if control.kind == ControlKind.MULTI_CHOICE:
                control.mask = int(value)  # type: ignore[arg-type]
            index = control.member_index(int(value))  # type: ignore[arg-type]
            if index is not None:
                control.selected = index
        return True

    def refresh_class(self, mixer_class: MixerClass) -> None:
        """Refresh every control of a class (used when its widgets are built)."""
        for control in mixer_class.controls:
            self.refresh(control)

    # =========================================================================
    # Model → device
    # =========================================================================

    def select_member(self, control: MixerControl, index: int) -> bool:
        """Select a CHOICE/MULTI_CHOICE member and write its value."""
        member = control.members[index]
        try:
            self.transport.write(control.device_id, control.kind, member.value)
        except MixerIOError as e:
            self._report(e)
            return False
        control.selected = index
        if control.kind == ControlKind.MULTI_CHOICE:
            control.mask = member.value
        return True

    def set_level(self, control: MixerControl, channel: int, level: int) -> bool:
        """Set a LEVEL control's channel.

        Locked channels all take the new level. Unlocked, the other channels
        keep the device's current levels, so those are read first.
        """
        level = clamp_level(level)
        if control.chans_unlocked:
            try:
                current = self.transport.read(control.device_id, control.kind, control.num_channels)
            except MixerIOError as e:
                self._report(e)
                return False
            levels = list(current)[: control.num_channels]  # type: ignore[arg-type]
            levels += [0] * (control.num_channels - len(levels))
            levels[channel] = level
        else:
            levels = [level] * control.num_channels

        try:
            self.transport.write(control.device_id, control.kind, levels)
        except MixerIOError as e:
            self._report(e)
            return False
        control.levels = levels
        return True

    def step_level(self, control: MixerControl, direction: int) -> bool:
        """Move the active channel up (+1) or down (-1) by the control's delta."""
        channel = control.current_chan
        return self.set_level(control, channel, control.levels[channel] + direction * control.delta)
