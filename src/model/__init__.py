"""Model classes for mixtui."""

from model.control import ControlKind, Member, MixerClass, MixerControl
from model.mixer import Mixer, display_name, find_root

__all__ = [
    "ControlKind",
    "Member",
    "MixerClass",
    "MixerControl",
    "Mixer",
    "display_name",
    "find_root",
]
