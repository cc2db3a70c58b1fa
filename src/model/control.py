"""Mixer controls and classes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from constants import DEFAULT_LEVEL_DELTA, MAX_CONTROLS


class ControlKind(IntEnum):
    """Kind of a mixer control.

    Values match the audio(4) mixer types so they can be passed straight to
    the device.
    """

    CHOICE = 1  # AUDIO_MIXER_ENUM: one member selected
    MULTI_CHOICE = 2  # AUDIO_MIXER_SET: bitmask of members
    LEVEL = 3  # AUDIO_MIXER_VALUE: per-channel levels


@dataclass(frozen=True)
class Member:
    """One selectable member of a CHOICE or MULTI_CHOICE control."""

    label: str
    value: int  # ordinal for CHOICE, bitmask for MULTI_CHOICE


@dataclass(eq=False)
class MixerControl:
    """A single mixer control.

    Device-reported attributes are fixed after enumeration. The fields in
    the "UI state" block are owned by the navigation and sync controllers.
    """

    name: str
    label: str
    device_id: int
    kind: ControlKind
    prev_id: int = -1
    next_id: int = -1
    members: list[Member] = field(default_factory=list)
    num_channels: int = 0
    delta: int = DEFAULT_LEVEL_DELTA
    units: str = ""

    # UI state
    selected: int = 0
    mask: int = 0
    levels: list[int] = field(default_factory=list)
    current_chan: int = 0
    chans_unlocked: bool = False

    def __post_init__(self) -> None:
        if self.kind == ControlKind.LEVEL:
            if self.delta <= 0:
                self.delta = DEFAULT_LEVEL_DELTA
            if len(self.levels) != self.num_channels:
                self.levels = [0] * self.num_channels

    @property
    def is_level(self) -> bool:
        return self.kind == ControlKind.LEVEL

    @property
    def row_count(self) -> int:
        """Number of widgets this control occupies on screen."""
        return self.num_channels if self.is_level else 1

    def member_index(self, value: int) -> int | None:
        """Return the index of the member whose value equals `value`."""
        for i, member in enumerate(self.members):
            if member.value == value:
                return i
        return None

    def active_members(self) -> list[int]:
        """Indices of MULTI_CHOICE members whose bits are set in `mask`."""
        return [i for i, m in enumerate(self.members) if m.value and self.mask & m.value == m.value]


@dataclass(eq=False)
class MixerClass:
    """A named group of controls as reported by the device."""

    name: str
    class_id: int
    controls: list[MixerControl] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return len(self.controls) >= MAX_CONTROLS

    def add_control(self, control: MixerControl) -> bool:
        """Append a control. Returns False if the class is at capacity."""
        if self.is_full:
            return False
        self.controls.append(control)
        return True
