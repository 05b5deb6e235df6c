"""Command-line entry point for the Python CHIP-8 emulator."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from pychip8.ui.app import AppConfig, Chip8App
from pychip8.utils import debug
from pychip8.video import resolve_palette

MIN_SCALE = 1
MAX_SCALE = 64


def _scale(value: str) -> int:
    try:
        scale = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"scale must be an integer: {value!r}") from exc
    return max(MIN_SCALE, min(MAX_SCALE, scale))


def _positive(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer: {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer: {value!r}")
    return number


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 emulator (Python)",
    )
    parser.add_argument("rom", type=Path, help="Path to a raw CHIP-8 program image")
    parser.add_argument(
        "scale_positional",
        nargs="?",
        type=_scale,
        metavar="scale",
        help="Window scale factor, same as --scale",
    )
    parser.add_argument(
        "--scale",
        type=_scale,
        default=None,
        help=f"Integer window scale factor, clamped to {MIN_SCALE}-{MAX_SCALE} (default: 12)",
    )
    parser.add_argument(
        "--cycles",
        type=_positive,
        default=10,
        help="Instructions executed per 60 Hz frame (default: 10)",
    )
    parser.add_argument("--seed", type=int, help="Seed for the CXNN random source")
    parser.add_argument(
        "--palette",
        default="mono",
        help="Palette preset (mono, amber, green) or 'RRGGBB,RRGGBB'",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop on unknown opcodes and call stack faults instead of ignoring them",
    )
    parser.add_argument(
        "--debug",
        metavar="CATEGORIES",
        help=f"Comma-separated debug categories ({', '.join(debug.CATEGORIES)} or all); overrides {debug.ENV_VAR}",
    )
    return parser


def build_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> AppConfig:
    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.debug is not None:
        unknown = debug.parse_categories(args.debug) - set(debug.CATEGORIES) - {"all"}
        if unknown:
            parser.error(f"unknown debug categories: {', '.join(sorted(unknown))}")
        os.environ[debug.ENV_VAR] = args.debug
        debug.reload_categories()
    try:
        palette = resolve_palette(args.palette)
    except ValueError as exc:
        parser.error(str(exc))

    scale = args.scale or args.scale_positional or 12
    return AppConfig(
        rom_path=args.rom,
        scale=scale,
        cycles_per_frame=args.cycles,
        palette=palette,
        seed=args.seed,
        strict=args.strict,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    config = build_config(args, parser)

    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(2, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
