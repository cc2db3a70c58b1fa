"""Mixer device handle: enumerate, read and write controls via ioctl."""

from __future__ import annotations

import fcntl
import logging
import os

from device.errors import MixerIOError, MixerOpenError
from device.ioctl import (
    AUDIO_MIXER_DEVINFO,
    AUDIO_MIXER_READ,
    AUDIO_MIXER_VALUE,
    AUDIO_MIXER_WRITE,
    Descriptor,
    pack_ctrl,
    pack_devinfo_request,
    unpack_ctrl,
    unpack_devinfo,
)
from model.control import ControlKind

log = logging.getLogger(__name__)


class MixerDevice:
    """An open mixer character device (e.g. /dev/mixer).

    Usage:
        with MixerDevice("/dev/mixer") as dev:
            desc = dev.enumerate(0)
            level = dev.read(desc.index, ControlKind.LEVEL, desc.num_channels)
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._fd: int | None = None

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    def open(self) -> MixerDevice:
        """Open the device read-write.

        Raises:
            MixerOpenError: If the device cannot be opened
        """
        try:
            self._fd = os.open(self.path, os.O_RDWR)
        except OSError as e:
            raise MixerOpenError(self.path, e.errno, e.strerror) from e
        log.info(f"Opened mixer device {self.path}")
        return self

    def close(self) -> None:
        """Close the device. Safe to call more than once."""
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
            log.info(f"Closed mixer device {self.path}")

    def __enter__(self) -> MixerDevice:
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _ioctl(self, request: int, buf: bytearray) -> bytearray:
        if self._fd is None:
            raise OSError(9, "mixer device is not open")
        fcntl.ioctl(self._fd, request, buf, True)
        return buf

    def enumerate(self, index: int) -> Descriptor | None:
        """Return the descriptor at `index`, or None past the last entry."""
        try:
            buf = self._ioctl(AUDIO_MIXER_DEVINFO, pack_devinfo_request(index))
        except OSError:
            return None
        return unpack_devinfo(buf)

    def read(self, device_id: int, kind: ControlKind, num_channels: int = 0) -> int | list[int]:
        """Read the current value of a control.

        Returns:
            The ordinal (CHOICE), bitmask (MULTI_CHOICE) or list of channel
            levels (LEVEL)

        Raises:
            MixerIOError: If the ioctl fails
        """
        buf = pack_ctrl(device_id, int(kind), num_channels=num_channels)
        try:
            self._ioctl(AUDIO_MIXER_READ, buf)
        except OSError as e:
            raise MixerIOError("AUDIO_MIXER_READ", device_id, e.errno) from e
        _dev, type_, value = unpack_ctrl(buf)
        if type_ == AUDIO_MIXER_VALUE and isinstance(value, list):
            return value[:num_channels] if num_channels else value
        return value

    def write(self, device_id: int, kind: ControlKind, value: int | list[int]) -> None:
        """Write a new value to a control.

        Raises:
            MixerIOError: If the ioctl fails
        """
        if kind == ControlKind.LEVEL:
            levels = list(value)  # type: ignore[arg-type]
            buf = pack_ctrl(device_id, int(kind), levels, num_channels=len(levels))
        else:
            buf = pack_ctrl(device_id, int(kind), value)
        try:
            self._ioctl(AUDIO_MIXER_WRITE, buf)
        except OSError as e:
            raise MixerIOError("AUDIO_MIXER_WRITE", device_id, e.errno) from e
