"""Mixer device exceptions."""

from __future__ import annotations

import os


class MixerError(Exception):
    """Base class for mixer device errors."""


class MixerOpenError(MixerError):
    """Raised when the mixer device cannot be opened."""

    def __init__(self, path: str, errno: int | None = None, strerror: str | None = None) -> None:
        self.path = path
        self.errno = errno
        reason = strerror or (os.strerror(errno) if errno else "unknown error")
        super().__init__(f"Cannot open mixer device {path}: {reason}")


class MixerIOError(MixerError):
    """Raised when a read or write on a single control fails."""

    def __init__(self, operation: str, device_id: int, errno: int | None = None) -> None:
        self.operation = operation
        self.device_id = device_id
        self.errno = errno
        reason = os.strerror(errno) if errno else "device error"
        super().__init__(f"{operation} {device_id} failed: {reason}")
