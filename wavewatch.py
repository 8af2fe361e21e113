"""
wavewatch: live banded waveform view of one audio file.

Usage:
    python wavewatch.py <input.wav>
    wavewatch <input.wav>

The window reloads the file whenever it changes on disk.
Set WW_DEBUG=1 for verbose diagnostics.
"""

import argparse
import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

from wavewatchlib import __version__
from wavewatchlib.audio import DecodeError, describe, load_samples
from wavewatchlib.config import ConfigError, build_options

console = Console()
err_console = Console(stderr=True)


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="wavewatch",
        description="Live banded waveform view of an audio file",
    )
    parser.add_argument("--version", action="version",
                        version=f"wavewatch {__version__}")
    parser.add_argument("input", type=str,
                        help="Audio file to display (.wav, .aiff, .flac, ...)")

    args_list = sys.argv[1:] if argv is None else list(argv)
    if not args_list:
        parser.print_usage(sys.stderr)
        sys.exit(1)

    return parser.parse_args(args_list)


def setup_logging():
    debug = os.environ.get("WW_DEBUG", "").strip().lower() in ("1", "true")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=debug)],
    )


def main(argv=None) -> int:
    args = parse_arguments(argv)
    setup_logging()

    try:
        samples = load_samples(args.input)
    except DecodeError as e:
        err_console.print(f"[bold red]Error:[/] {e}")
        return 1

    console.print(f"[bold]{describe(samples)}[/]")

    from wavewatchgui.settings import load_config
    config = load_config()
    try:
        options = build_options(config["viewer"], config["colors"])
    except ConfigError as e:
        err_console.print(f"[bold red]Error:[/] {e}")
        return 1

    from wavewatchgui import run
    return run(args.input, samples, options)


if __name__ == "__main__":
    sys.exit(main())
