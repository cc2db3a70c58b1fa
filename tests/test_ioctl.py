"""Tests for the audio(4) mixer ioctl layout."""

import struct

import pytest

from conftest import devinfo_bytes
from device.ioctl import (
    AUDIO_MIXER_DEVINFO,
    AUDIO_MIXER_ENUM,
    AUDIO_MIXER_READ,
    AUDIO_MIXER_SET,
    AUDIO_MIXER_VALUE,
    AUDIO_MIXER_WRITE,
    CTRL_SIZE,
    DEVINFO_SIZE,
    Descriptor,
    pack_ctrl,
    pack_devinfo_request,
    unpack_ctrl,
    unpack_devinfo,
)


class TestLayout:
    """Structure sizes and request numbers match sys/audioio.h."""

    def test_devinfo_size(self):
        """mixer_devinfo_t: 40-byte header + 772-byte union."""
        assert DEVINFO_SIZE == 812

    def test_ctrl_size(self):
        """mixer_ctrl_t: dev, type, then mixer_level_t (int + 8 bytes)."""
        assert CTRL_SIZE == 20

    def test_request_numbers(self):
        """_IOWR('M', n, size) encodes direction, size, group and number."""
        assert AUDIO_MIXER_READ == 0xC0144D00
        assert AUDIO_MIXER_WRITE == 0xC0144D01
        assert AUDIO_MIXER_DEVINFO == 0xC32C4D02


class TestDevinfo:
    """Decoding mixer_devinfo_t."""

    def test_request_sets_index(self):
        buf = pack_devinfo_request(7)
        assert len(buf) == DEVINFO_SIZE
        assert struct.unpack_from("=i", buf, 0)[0] == 7

    def test_decode_enum(self):
        desc = Descriptor(
            index=3, label="mic", type=AUDIO_MIXER_ENUM, mixer_class=1,
            prev=-1, next=4, members=[("off", 0), ("on", 1)],
        )
        decoded = unpack_devinfo(devinfo_bytes(desc))
        assert decoded.label == "mic"
        assert decoded.mixer_class == 1
        assert decoded.next == 4
        assert decoded.prev == -1
        assert decoded.members == [("off", 0), ("on", 1)]

    def test_decode_set_masks(self):
        desc = Descriptor(
            index=5, label="record.source", type=AUDIO_MIXER_SET, mixer_class=2,
            members=[("mic", 1), ("cd", 4)],
        )
        decoded = unpack_devinfo(devinfo_bytes(desc))
        assert decoded.members == [("mic", 1), ("cd", 4)]

    def test_decode_value(self):
        desc = Descriptor(
            index=9, label="master", type=AUDIO_MIXER_VALUE, mixer_class=0,
            num_channels=2, delta=16, units="volume",
        )
        decoded = unpack_devinfo(devinfo_bytes(desc))
        assert decoded.num_channels == 2
        assert decoded.delta == 16
        assert decoded.units == "volume"
        assert decoded.members == []

    def test_label_truncated_to_device_length(self):
        desc = Descriptor(index=0, label="a" * 20, type=AUDIO_MIXER_ENUM, mixer_class=0)
        assert unpack_devinfo(devinfo_bytes(desc)).label == "a" * 16

    def test_member_count_is_bounded(self):
        """A corrupt num_mem never reads past the member array."""
        buf = bytearray(devinfo_bytes(Descriptor(index=0, label="x", type=AUDIO_MIXER_ENUM, mixer_class=0)))
        struct.pack_into("=i", buf, 40, 1000)
        assert len(unpack_devinfo(bytes(buf)).members) == 32


class TestCtrl:
    """Encoding and decoding mixer_ctrl_t."""

    def test_ord(self):
        buf = pack_ctrl(3, AUDIO_MIXER_ENUM, 1)
        assert len(buf) == CTRL_SIZE
        assert unpack_ctrl(buf) == (3, AUDIO_MIXER_ENUM, 1)

    def test_levels(self):
        buf = pack_ctrl(4, AUDIO_MIXER_VALUE, [10, 200], num_channels=2)
        assert unpack_ctrl(buf) == (4, AUDIO_MIXER_VALUE, [10, 200])

    def test_level_read_request_has_channel_count(self):
        buf = pack_ctrl(4, AUDIO_MIXER_VALUE, num_channels=2)
        assert struct.unpack_from("=iii", buf, 0) == (4, AUDIO_MIXER_VALUE, 2)

    @pytest.mark.parametrize("level", [256, -1])
    def test_level_out_of_byte_range_rejected(self, level):
        with pytest.raises(struct.error):
            pack_ctrl(4, AUDIO_MIXER_VALUE, [level], num_channels=1)
