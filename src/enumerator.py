"""Build the mixer control tree from a device's descriptor stream."""

from __future__ import annotations

import logging
from typing import Iterator, Protocol

from constants import MAX_CHANNELS
from device.ioctl import (
    AUDIO_MIXER_CLASS,
    AUDIO_MIXER_ENUM,
    AUDIO_MIXER_SET,
    AUDIO_MIXER_VALUE,
    Descriptor,
)
from model import ControlKind, Member, Mixer, MixerClass, MixerControl, display_name, find_root

log = logging.getLogger(__name__)

# Descriptor type -> control kind
CONTROL_KINDS = {
    AUDIO_MIXER_ENUM: ControlKind.CHOICE,
    AUDIO_MIXER_SET: ControlKind.MULTI_CHOICE,
    AUDIO_MIXER_VALUE: ControlKind.LEVEL,
}


class DescriptorSource(Protocol):
    """Anything that yields mixer descriptors by increasing index."""

    def enumerate(self, index: int) -> Descriptor | None: ...


def iter_descriptors(source: DescriptorSource) -> Iterator[Descriptor]:
    """Yield descriptors from index 0 until the source is exhausted."""
    index = 0
    while True:
        desc = source.enumerate(index)
        if desc is None:
            return
        yield desc
        index += 1


def resolve_name(desc: Descriptor, table: dict[int, Descriptor]) -> str:
    """Compute a control's display name from its prev chain.

    Only the top ancestor contributes, whatever the depth of the chain.
    """
    if desc.prev == -1 or desc.prev not in table:
        return desc.label

    def prev_of(index: int) -> int | None:
        entry = table.get(index)
        return entry.prev if entry is not None else None

    root = find_root(desc.prev, prev_of)
    if root == desc.index:
        # cyclic links lead back to the control itself
        return desc.label
    return display_name(desc.label, table[root].label)


def control_from_descriptor(desc: Descriptor, name: str) -> MixerControl:
    """Create a MixerControl from a CHOICE/MULTI_CHOICE/LEVEL descriptor."""
    kind = CONTROL_KINDS[desc.type]
    if kind == ControlKind.LEVEL:
        extra = {
            "num_channels": max(1, min(desc.num_channels, MAX_CHANNELS)),
            "delta": desc.delta,
            "units": desc.units,
        }
    else:
        extra = {"members": [Member(label, value) for label, value in desc.members]}
    return MixerControl(
        name=name,
        label=desc.label,
        device_id=desc.index,
        kind=kind,
        prev_id=desc.prev,
        next_id=desc.next,
        **extra,
    )


def build_mixer(source: DescriptorSource) -> Mixer:
    """Enumerate a device into a Mixer.

    Pass 1 collects the classes, pass 2 the controls: a control may be
    listed before its class, but a class must exist before a control can be
    attached to it. Entries beyond capacity, and controls of unknown
    classes, are dropped.
    """
    mixer = Mixer()

    for desc in iter_descriptors(source):
        if desc.type != AUDIO_MIXER_CLASS:
            continue
        if not mixer.add_class(MixerClass(name=desc.label, class_id=desc.mixer_class)):
            log.debug(f"Class limit reached, dropping class {desc.label!r}")

    entries = [d for d in iter_descriptors(source) if d.type in CONTROL_KINDS]
    table = {d.index: d for d in entries}

    for desc in entries:
        mixer_class = mixer.get_class(desc.mixer_class)
        if mixer_class is None:
            log.debug(f"No class {desc.mixer_class} for control {desc.label!r}, dropping")
            continue
        if mixer_class.is_full:
            log.debug(f"Class {mixer_class.name!r} is full, dropping control {desc.label!r}")
            continue
        control = control_from_descriptor(desc, resolve_name(desc, table))
        mixer.add_control(mixer_class, control)

    log.info(
        f"Enumerated {len(mixer.classes)} classes, "
        f"{sum(len(c.controls) for c in mixer.classes)} controls"
    )
    return mixer
