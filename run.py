"""Delve CLI entry point.

Generates a dungeon for a seed and prints it, or runs structural diagnostics
over a batch of seeds. Accepts configuration via flags and ``DUNGEON_*``
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import sys
from dataclasses import replace
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from delve import __version__
from delve.dungeon import ConfigError, Dungeon, DungeonConfig, ShapeConfig
from delve.dungeon.config import CORRIDOR_MODES
from delve.dungeon.diagnostics import analyze
from delve.dungeon.render import render
from delve.logging_utils import get_logger

_color_init()

log = get_logger("delve.cli")

DEFAULT_DIAGNOSE_SEEDS = [42, 1337, 292372, 730727]


def _color_enabled(no_color: bool) -> bool:
    # Disable colors if output is not a real terminal (e.g., during pytest capture)
    try:
        return not no_color and sys.stdout.isatty()
    except (AttributeError, ValueError):  # pragma: no cover - closed or replaced stdout
        return False


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve dungeon generator

    Build a seeded binary-space-partition dungeon and print it, or check the
    structural invariants of many seeds at once. Configuration can be provided
    via CLI flags or environment variables. If both are present, CLI flags
    take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          DUNGEON_WIDTH, DUNGEON_LENGTH      Grid extent (default: 100x100)
          DUNGEON_SEED                       Integer seed or 'random'
          DUNGEON_MAX_ITERATIONS             Partition depth budget (default: 10)
          DUNGEON_CORRIDOR_WIDTH             Corridor width, clamped to >= 5
          DUNGEON_CORRIDOR_MODE              smart | bounding_box
          DUNGEON_ROOM_WIDTH_MIN/LENGTH_MIN  Minimum room size (default: 10)
          DUNGEON_VARIED_SHAPES              1 to carve L/T/U/cross/circular/recessed rooms
          DELVE_LOG_LEVEL, DELVE_LOG_JSON    Structured log output on stderr

        Examples:
          # Print the default 100x100 dungeon for seed 42
          python run.py generate --seed 42

          # Smaller map with varied room shapes, raw cell codes
          python run.py generate --seed 7 --width 60 --length 40 --shapes --raw

          # Load variables from .env then generate
          python run.py --env-file .env generate

          # Structural diagnostics across seeds (JSON, non-zero exit on problems)
          python run.py diagnose 42 1337 9001
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve Dungeon Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    def add_layout_flags(p):
        p.add_argument("--seed", default=None, help="Integer seed or 'random' (default: env DUNGEON_SEED or random)")
        p.add_argument("--width", type=int, default=None, help="Grid width (default: env DUNGEON_WIDTH or 100)")
        p.add_argument("--length", type=int, default=None, help="Grid length (default: env DUNGEON_LENGTH or 100)")
        p.add_argument("--iterations", type=int, default=None, help="Partition depth budget")
        p.add_argument("--corridor-width", dest="corridor_width", type=int, default=None, help="Corridor width")
        p.add_argument(
            "--corridor-mode",
            dest="corridor_mode",
            choices=CORRIDOR_MODES,
            default=None,
            help="Corridor router (default: smart)",
        )
        p.add_argument("--shapes", action="store_true", help="Enable non-rectangular room shapes")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a dungeon and print the map with a short banner",
    )
    add_layout_flags(gen_parser)
    gen_parser.add_argument("--no-color", dest="no_color", action="store_true", help="Disable ANSI colours")
    gen_parser.add_argument("--raw", action="store_true", help="Print one-letter cell codes instead of glyphs")
    gen_parser.add_argument("--metrics", action="store_true", help="Print generation metrics as JSON after the map")
    gen_parser.set_defaults(command="generate")

    diag_parser = subparsers.add_parser(
        "diagnose",
        help="Run structural checks over seeds and print JSON",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Exits non-zero when any seed breaks a layout invariant.",
    )
    add_layout_flags(diag_parser)
    diag_parser.add_argument("seeds", nargs="*", type=int, help="Seeds to check (default: a small built-in list)")
    diag_parser.set_defaults(command="diagnose")

    # If no subcommand provided, default to generate
    head = argv[0] if argv else ""
    if head not in ("generate", "diagnose", "-h", "--help", "--version") and not head.startswith("--env-file"):
        argv = ["generate"] + list(argv)

    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(list(argv) + ["generate"])
    return args


def build_config(args: argparse.Namespace) -> DungeonConfig:
    """Environment first, then CLI flags on top."""
    cfg = DungeonConfig.from_env()
    overrides = {
        "dungeon_width": args.width,
        "dungeon_length": args.length,
        "max_iterations": args.iterations,
        "corridor_width": args.corridor_width,
        "corridor_mode": args.corridor_mode,
    }
    for attr, val in overrides.items():
        if val is not None:
            setattr(cfg, attr, val)
    seed = getattr(args, "seed", None)
    if seed is not None:
        if str(seed).lower() == "random":
            cfg.seed = None
        else:
            try:
                cfg.seed = int(seed)
            except ValueError:
                raise ConfigError(f"--seed must be an integer or 'random' (got {seed!r})") from None
    if args.shapes and cfg.shapes is None:
        cfg.shapes = ShapeConfig()
    return cfg


def _banner(d: Dungeon, color: bool) -> str:
    title = f"{Fore.CYAN}{Style.BRIGHT}Delve Dungeon{Style.RESET_ALL}" if color else "Delve Dungeon"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Seed:'):12} {value(d.seed)}",
        f"  {label('Size:'):12} {value(f'{d.width}x{d.length}')}",
        f"  {label('Rooms:'):12} {value(len(d.rooms))}",
        f"  {label('Corridors:'):12} {value(len(d.corridors))}",
        f"  {label('Router:'):12} {value(d.config.corridor_mode)}",
        f"  {label('Shapes:'):12} {value('enabled' if d.config.shapes else 'off')}",
        divider,
        "",
    ]
    return "\n".join(lines)


def _generate(args) -> int:
    color = _color_enabled(args.no_color)
    d = Dungeon(build_config(args))
    print(_banner(d, color))
    print(render(d.grid, color=color, raw=args.raw))
    if args.metrics:
        print(json.dumps(d.metrics, indent=2, default=str))
    if d.failures:
        warn = f"{Fore.RED}[WARN]{Style.RESET_ALL}" if color else "[WARN]"
        print(f"{warn} {len(d.failures)} partition pair(s) left unconnected")
    return 0


def _diagnose(args) -> int:
    base = build_config(args)
    seeds = args.seeds or ([base.seed] if isinstance(base.seed, int) else DEFAULT_DIAGNOSE_SEEDS)
    results = []
    for seed in seeds:
        results.append(analyze(Dungeon(replace(base, seed=seed))))
    print(json.dumps({"results": results}, indent=2))
    # Non-zero exit if any failure
    return 0 if all(r["ok"] for r in results) else 1


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "generate").lower()
    log.info(event="startup", mode=mode, version=__version__)
    try:
        if mode == "diagnose":
            return _diagnose(args)
        return _generate(args)
    except ConfigError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
