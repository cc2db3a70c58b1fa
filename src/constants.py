"""Shared constants for mixtui."""

# Device defaults
DEFAULT_MIXER_DEVICE = "/dev/mixer"
MIXER_DEVICE_ENV = "MIXERDEVICE"

# Model capacity (sized for realistic hardware)
MAX_CLASSES = 16
MAX_CONTROLS = 64
MAX_CHANNELS = 8

# Level scale
LEVEL_MIN = 0
LEVEL_MAX = 255
# Step used when the device reports a delta of 0
DEFAULT_LEVEL_DELTA = 8

# Screen layout (rows)
HEADER_ROWS = 5  # class bar (3) + controls heading (2)
FOOTER_MARGIN = 3
ROWS_PER_WIDGET = 3
