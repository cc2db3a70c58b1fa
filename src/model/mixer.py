"""Mixer: the control tree for one device."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from constants import MAX_CLASSES
from model.control import MixerClass, MixerControl

log = logging.getLogger(__name__)


def find_root(start: int, lookup: Callable[[int], int | None]) -> int:
    """Walk `prev` links from `start` to the top of the chain.

    Args:
        start: Index to start from
        lookup: Returns the `prev` link of an index, or None if the index is unknown

    Returns:
        The last index reached. The walk stops at an entry with no parent, at
        an unknown index, or before revisiting an index (cyclic links).
    """
    current = start
    seen = {current}
    while True:
        prev = lookup(current)
        if prev is None or prev == -1:
            return current
        if prev in seen:
            log.warning(f"Cycle in mixer prev links at {prev}")
            return current
        if lookup(prev) is None:
            return current
        seen.add(prev)
        current = prev


def display_name(label: str, root_label: str | None) -> str:
    """Build a control's display name from its own and its root's label."""
    if root_label is None:
        return label
    return f"{root_label}.{label}"


@dataclass(eq=False)
class Mixer:
    """All classes and controls of a mixer device.

    Controls are also indexed by device_id, which keeps ids unique.
    """

    classes: list[MixerClass] = field(default_factory=list)
    _by_device_id: dict[int, MixerControl] = field(default_factory=dict, repr=False)

    @property
    def is_full(self) -> bool:
        return len(self.classes) >= MAX_CLASSES

    def add_class(self, mixer_class: MixerClass) -> bool:
        """Append a class. Returns False if the mixer is at capacity."""
        if self.is_full:
            return False
        self.classes.append(mixer_class)
        return True

    def add_control(self, mixer_class: MixerClass, control: MixerControl) -> bool:
        """Attach a control to one of this mixer's classes."""
        if self.get_control(control.device_id) is not None:
            log.debug(f"Duplicate device id {control.device_id} ignored")
            return False
        if not mixer_class.add_control(control):
            return False
        self._by_device_id[control.device_id] = control
        return True

    def get_class(self, class_id: int) -> MixerClass | None:
        """Find a class by its device-assigned class id."""
        for mixer_class in self.classes:
            if mixer_class.class_id == class_id:
                return mixer_class
        return None

    def get_control(self, device_id: int) -> MixerControl | None:
        """Find a control by device_id."""
        return self._by_device_id.get(device_id)

    @property
    def class_names(self) -> list[str]:
        return [c.name for c in self.classes]
