"""Controller layer: mediates between the UI, the model and the device.

This package contains:
- sync: DeviceSync for device ↔ model value synchronization
- navigation: Navigator focus state machine and the ControlView protocol
"""

from controller.sync import DeviceSync, clamp_level
from controller.navigation import (
    KEY_ALIASES,
    ChannelFocus,
    ClassSelect,
    ControlFocus,
    ControlView,
    FocusState,
    MixerContext,
    NavKey,
    Navigator,
)

__all__ = [
    # Sync
    "DeviceSync",
    "clamp_level",
    # Navigation
    "KEY_ALIASES",
    "ChannelFocus",
    "ClassSelect",
    "ControlFocus",
    "ControlView",
    "FocusState",
    "MixerContext",
    "NavKey",
    "Navigator",
]
