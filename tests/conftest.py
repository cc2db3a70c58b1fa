"""Shared fixtures for mixtui tests."""

import errno
import struct

import pytest

from controller import DeviceSync, MixerContext, Navigator
from device import (
    AUDIO_MIXER_CLASS,
    AUDIO_MIXER_ENUM,
    AUDIO_MIXER_SET,
    AUDIO_MIXER_VALUE,
    Descriptor,
    MixerIOError,
)
from device.ioctl import (
    _HEADER_FMT,
    _HEADER_SIZE,
    _MEMBER_FMT,
    _MEMBER_SIZE,
    _VALUE_FMT,
    DEVINFO_SIZE,
    MAX_AUDIO_DEV_LEN,
    MAX_MEMBERS,
)
from enumerator import build_mixer
from model import ControlKind
from viewport import Viewport


# =============================================================================
# Descriptor builders
# =============================================================================


def class_desc(index, name, class_id=None):
    """A CLASS descriptor (class id defaults to its index)."""
    return Descriptor(
        index=index,
        label=name,
        type=AUDIO_MIXER_CLASS,
        mixer_class=index if class_id is None else class_id,
    )


def enum_desc(index, label, class_id, members, prev=-1, next=-1):
    """A CHOICE descriptor; members are labels, ordinals are their positions."""
    return Descriptor(
        index=index,
        label=label,
        type=AUDIO_MIXER_ENUM,
        mixer_class=class_id,
        prev=prev,
        next=next,
        members=[(name, ord_) for ord_, name in enumerate(members)],
    )


def set_desc(index, label, class_id, members, prev=-1, next=-1):
    """A MULTI_CHOICE descriptor; member i has mask 1 << i."""
    return Descriptor(
        index=index,
        label=label,
        type=AUDIO_MIXER_SET,
        mixer_class=class_id,
        prev=prev,
        next=next,
        members=[(name, 1 << i) for i, name in enumerate(members)],
    )


def value_desc(index, label, class_id, channels=2, delta=8, prev=-1, next=-1):
    """A LEVEL descriptor."""
    return Descriptor(
        index=index,
        label=label,
        type=AUDIO_MIXER_VALUE,
        mixer_class=class_id,
        prev=prev,
        next=next,
        num_channels=channels,
        delta=delta,
    )


# =============================================================================
# Kernel buffers
# =============================================================================


def encode_name(name):
    return name.encode("ascii", errors="replace")[:MAX_AUDIO_DEV_LEN]


def devinfo_bytes(desc):
    """Encode a Descriptor the way the kernel fills in mixer_devinfo_t."""
    buf = bytearray(DEVINFO_SIZE)
    struct.pack_into(
        _HEADER_FMT, buf, 0,
        desc.index, encode_name(desc.label), 0,
        desc.type, desc.mixer_class, desc.next, desc.prev,
    )
    offset = _HEADER_SIZE
    if desc.type in (AUDIO_MIXER_ENUM, AUDIO_MIXER_SET):
        members = desc.members[:MAX_MEMBERS]
        struct.pack_into("=i", buf, offset, len(members))
        offset += 4
        for i, (label, value) in enumerate(members):
            struct.pack_into(_MEMBER_FMT, buf, offset + i * _MEMBER_SIZE, encode_name(label), 0, value)
    elif desc.type == AUDIO_MIXER_VALUE:
        struct.pack_into(_VALUE_FMT, buf, offset, encode_name(desc.units), 0, desc.num_channels, desc.delta)
    return bytes(buf)


# =============================================================================
# Test doubles
# =============================================================================


class MemoryTransport:
    """In-memory mixer device: a descriptor list plus current values."""

    def __init__(self, descriptors, values=None):
        self.descriptors = list(descriptors)
        self.values = dict(values or {})
        self.reads = []
        self.writes = []
        self.fail_reads = set()
        self.fail_writes = set()
        self.enumerate_calls = 0

    def enumerate(self, index):
        self.enumerate_calls += 1
        if 0 <= index < len(self.descriptors):
            return self.descriptors[index]
        return None

    def read(self, device_id, kind, num_channels=0):
        self.reads.append(device_id)
        if device_id in self.fail_reads:
            raise MixerIOError("AUDIO_MIXER_READ", device_id, errno.EIO)
        if kind == ControlKind.LEVEL:
            return list(self.values.get(device_id, [0] * num_channels))
        return self.values.get(device_id, 0)

    def write(self, device_id, kind, value):
        if device_id in self.fail_writes:
            raise MixerIOError("AUDIO_MIXER_WRITE", device_id, errno.EIO)
        self.writes.append((device_id, value))
        self.values[device_id] = list(value) if kind == ControlKind.LEVEL else value


class RecordingView:
    """ControlView that records what the navigator asked for."""

    def __init__(self):
        self.calls = []
        self.built = []
        self.placements = []
        self.active = None
        self.class_cursor = None
        self.redraws = []
        self.quit_called = False

    def build_class_widgets(self, mixer_class):
        self.calls.append("build")
        self.built.append(mixer_class.name)

    def destroy_class_widgets(self):
        self.calls.append("destroy")

    def place_widgets(self, placements):
        self.calls.append("place")
        self.placements = list(placements)

    def activate(self, state):
        self.calls.append("activate")
        self.active = state

    def redraw(self, control, channels=None):
        self.redraws.append((control.name, None if channels is None else list(channels)))

    def show_class(self, index):
        self.class_cursor = index

    def quit(self):
        self.calls.append("quit")
        self.quit_called = True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sample_descriptors():
    """Two classes: inputs (mic choice, line level) and outputs (master level, select set)."""
    return [
        class_desc(0, "inputs"),
        class_desc(1, "outputs"),
        enum_desc(2, "mic", 0, ["off", "on"]),
        value_desc(3, "line", 0, channels=2, delta=0),
        value_desc(4, "master", 1, channels=2, delta=16),
        set_desc(5, "select", 1, ["mic", "line", "cd"]),
    ]


@pytest.fixture
def transport(sample_descriptors):
    """MemoryTransport for the sample descriptors with some current values."""
    return MemoryTransport(
        sample_descriptors,
        values={2: 1, 3: [10, 20], 4: [128, 128], 5: 2},
    )


@pytest.fixture
def mixer(transport):
    return build_mixer(transport)


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def make_navigator(view):
    """Factory: navigator over a transport with a given terminal height."""

    def _make(transport, height=24):
        mixer = build_mixer(transport)
        context = MixerContext(mixer=mixer, viewport=Viewport(height=height))
        errors = []
        sync = DeviceSync(transport, on_error=errors.append)
        nav = Navigator(context, sync, view)
        nav.errors = errors
        return nav

    return _make


@pytest.fixture
def navigator(make_navigator, transport):
    """Started navigator over the sample mixer."""
    nav = make_navigator(transport)
    nav.start()
    return nav
