"""Command-line interface for mixtui."""

import argparse
import os
import sys
from dataclasses import dataclass
from typing import NoReturn

from constants import DEFAULT_MIXER_DEVICE, MIXER_DEVICE_ENV
from device import MixerDevice, MixerError, MixerOpenError
from enumerator import build_mixer


@dataclass
class ParsedArgs:
    """Parsed command-line arguments."""

    device: str


def print_error_box(title: str, *lines: str) -> None:
    """Print a formatted error box to stderr.

    Args:
        title: The error title (will be prefixed with "Error: ")
        *lines: Additional lines to print in the box
    """
    print("=" * 60, file=sys.stderr)
    print(f"Error: {title}", file=sys.stderr)
    print("", file=sys.stderr)
    for line in lines:
        print(line, file=sys.stderr)
    print("=" * 60, file=sys.stderr)


def default_device() -> str:
    """Mixer device used when -d is not given."""
    return os.environ.get(MIXER_DEVICE_ENV) or DEFAULT_MIXER_DEVICE


class MixtuiArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for mixtui CLI."""
    parser = MixtuiArgumentParser(
        prog="mixtui",
        description="Terminal control panel for audio mixer devices.",
        epilog=(
            "Keys: arrows or h/j/k/l move and adjust, u toggles channel lock, "
            "F1-F16 jump to a class, Esc leaves a control (or quits from the class bar)."
        ),
    )
    parser.add_argument(
        "-d",
        metavar="device",
        dest="device",
        default=None,
        help=f"mixer device (default: ${MIXER_DEVICE_ENV} or {DEFAULT_MIXER_DEVICE})",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command line arguments.

    Returns:
        ParsedArgs with the mixer device path.
    """
    parser = create_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    return ParsedArgs(device=args.device or default_device())


def main() -> None:
    """Main entry point."""
    args = parse_args()

    device = MixerDevice(args.device)
    try:
        device.open()
    except MixerOpenError as e:
        print_error_box(str(e), "Use -d to select another mixer device.")
        sys.exit(1)

    with device:
        mixer = build_mixer(device)
        if not mixer.classes:
            print_error_box(f"No mixer classes reported by {args.device}")
            sys.exit(1)

        # Imported here so logging is only configured once the TUI is about to start
        from app import MixerTUI

        app = MixerTUI(mixer, device, device_path=args.device)
        try:
            app.run()
        except MixerError as e:
            print_error_box(str(e))
            sys.exit(1)

    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
