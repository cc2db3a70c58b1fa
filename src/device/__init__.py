"""Mixer device transport.

This package talks to the audio(4) mixer interface:
- ioctl: binary layout of mixer_devinfo_t / mixer_ctrl_t and request numbers
- mixer_device: MixerDevice handle with enumerate/read/write
- errors: MixerError hierarchy
"""

from device.errors import MixerError, MixerIOError, MixerOpenError
from device.ioctl import (
    AUDIO_MIXER_CLASS,
    AUDIO_MIXER_ENUM,
    AUDIO_MIXER_LAST,
    AUDIO_MIXER_SET,
    AUDIO_MIXER_VALUE,
    Descriptor,
)
from device.mixer_device import MixerDevice

__all__ = [
    # Errors
    "MixerError",
    "MixerIOError",
    "MixerOpenError",
    # Descriptors
    "AUDIO_MIXER_CLASS",
    "AUDIO_MIXER_ENUM",
    "AUDIO_MIXER_LAST",
    "AUDIO_MIXER_SET",
    "AUDIO_MIXER_VALUE",
    "Descriptor",
    # Handle
    "MixerDevice",
]
