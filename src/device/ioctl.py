"""Binary layout of the audio(4) mixer ioctls.

This module encodes and decodes the structures exchanged with a NetBSD
mixer device through AUDIO_MIXER_DEVINFO, AUDIO_MIXER_READ and
AUDIO_MIXER_WRITE, following sys/audioio.h:

    typedef struct mixer_devinfo {
        int index;
        audio_mixer_name_t label;      /* char name[16]; int msg_id; */
        int type;
        int mixer_class;
        int next, prev;
        union { enum, set, value } un;
    } mixer_devinfo_t;

    typedef struct mixer_ctrl {
        int dev;
        int type;
        union { int ord; int mask; mixer_level_t value; } un;
    } mixer_ctrl_t;

All fields are naturally aligned ints and char arrays, so native byte order
with standard sizes ("=") matches the kernel layout.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from constants import MAX_CHANNELS

# Mixer descriptor types
AUDIO_MIXER_CLASS = 0
AUDIO_MIXER_ENUM = 1
AUDIO_MIXER_SET = 2
AUDIO_MIXER_VALUE = 3

# Link value for "no prev/next entry"
AUDIO_MIXER_LAST = -1

MAX_AUDIO_DEV_LEN = 16
MAX_MEMBERS = 32

# audio_mixer_name_t: char name[16]; int msg_id;
_NAME_FMT = f"{MAX_AUDIO_DEV_LEN}si"
_MEMBER_FMT = "=" + _NAME_FMT + "i"
_HEADER_FMT = "=i" + _NAME_FMT + "iiii"
_VALUE_FMT = "=" + _NAME_FMT + "ii"

_HEADER_SIZE = struct.calcsize(_HEADER_FMT)
_MEMBER_SIZE = struct.calcsize(_MEMBER_FMT)
_UNION_SIZE = 4 + MAX_MEMBERS * _MEMBER_SIZE  # largest member: enum/set

DEVINFO_SIZE = _HEADER_SIZE + _UNION_SIZE

# mixer_ctrl_t: int dev; int type; union (largest: int num_channels; u_char level[8])
_CTRL_HEAD_FMT = "=ii"
_CTRL_INT_FMT = "=iii8x"
_CTRL_LEVEL_FMT = f"=iii{MAX_CHANNELS}B"

CTRL_SIZE = struct.calcsize(_CTRL_LEVEL_FMT)

# ioctl direction bits and parameter mask (sys/ioccom.h)
IOC_OUT = 0x40000000
IOC_IN = 0x80000000
IOC_INOUT = IOC_IN | IOC_OUT
IOCPARM_MASK = 0x1FFF


def _iowr(group: str, num: int, size: int) -> int:
    """Build an _IOWR request number."""
    return IOC_INOUT | ((size & IOCPARM_MASK) << 16) | (ord(group) << 8) | num


AUDIO_MIXER_READ = _iowr("M", 0, CTRL_SIZE)
AUDIO_MIXER_WRITE = _iowr("M", 1, CTRL_SIZE)
AUDIO_MIXER_DEVINFO = _iowr("M", 2, DEVINFO_SIZE)


@dataclass
class Descriptor:
    """One entry of the device's mixer enumeration."""

    index: int
    label: str
    type: int
    mixer_class: int
    next: int = AUDIO_MIXER_LAST
    prev: int = AUDIO_MIXER_LAST
    # (label, ord) for ENUM, (label, mask) for SET
    members: list[tuple[str, int]] = field(default_factory=list)
    num_channels: int = 0
    delta: int = 0
    units: str = ""


def _decode_name(raw: bytes) -> str:
    """Decode a NUL-padded device name."""
    return raw.split(b"\0", 1)[0].decode("ascii", errors="replace")


def pack_devinfo_request(index: int) -> bytearray:
    """Build a mixer_devinfo_t buffer asking for entry `index`."""
    buf = bytearray(DEVINFO_SIZE)
    struct.pack_into("=i", buf, 0, index)
    return buf


def unpack_devinfo(buf: bytes) -> Descriptor:
    """Decode a mixer_devinfo_t filled in by the kernel."""
    index, name, _msg_id, type_, mixer_class, next_, prev = struct.unpack_from(
        _HEADER_FMT, buf, 0
    )
    desc = Descriptor(
        index=index,
        label=_decode_name(name),
        type=type_,
        mixer_class=mixer_class,
        next=next_,
        prev=prev,
    )

    offset = _HEADER_SIZE
    if type_ in (AUDIO_MIXER_ENUM, AUDIO_MIXER_SET):
        (num_mem,) = struct.unpack_from("=i", buf, offset)
        num_mem = max(0, min(num_mem, MAX_MEMBERS))
        offset += 4
        for i in range(num_mem):
            mname, _mid, value = struct.unpack_from(_MEMBER_FMT, buf, offset + i * _MEMBER_SIZE)
            desc.members.append((_decode_name(mname), value))
    elif type_ == AUDIO_MIXER_VALUE:
        units, _uid, num_channels, delta = struct.unpack_from(_VALUE_FMT, buf, offset)
        desc.units = _decode_name(units)
        desc.num_channels = num_channels
        desc.delta = delta
    return desc


def pack_ctrl(dev: int, type_: int, value: int | list[int] | None = None, num_channels: int = 0) -> bytearray:
    """Build a mixer_ctrl_t buffer.

    Args:
        dev: Control index (device_id)
        type_: AUDIO_MIXER_ENUM, AUDIO_MIXER_SET or AUDIO_MIXER_VALUE
        value: Ordinal or mask for ENUM/SET, channel levels for VALUE
        num_channels: Channel count for VALUE reads and writes
    """
    buf = bytearray(CTRL_SIZE)
    if type_ == AUDIO_MIXER_VALUE:
        levels = list(value or [])[:MAX_CHANNELS]
        channels = num_channels or len(levels)
        levels += [0] * (MAX_CHANNELS - len(levels))
        struct.pack_into(_CTRL_LEVEL_FMT, buf, 0, dev, type_, channels, *levels)
    else:
        struct.pack_into(_CTRL_INT_FMT, buf, 0, dev, type_, int(value or 0))
    return buf


def unpack_ctrl(buf: bytes) -> tuple[int, int, int | list[int]]:
    """Decode a mixer_ctrl_t into (dev, type, value).

    The value is an int for ENUM/SET and a list of levels for VALUE.
    """
    dev, type_ = struct.unpack_from(_CTRL_HEAD_FMT, buf, 0)
    if type_ == AUDIO_MIXER_VALUE:
        _dev, _type, channels, *levels = struct.unpack_from(_CTRL_LEVEL_FMT, buf, 0)
        channels = max(0, min(channels, MAX_CHANNELS))
        return dev, type_, list(levels[:channels])
    _dev, _type, value = struct.unpack_from(_CTRL_INT_FMT, buf, 0)
    return dev, type_, value
