"""Command-line interface for binwrap."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .config import BinwrapConfig
from .errors import BinwrapError
from .sources import match_sources
from .utils import console, current_platform, log, setup_logging
from .wrapper import run

logger = logging.getLogger(__name__)


def list_binaries(_args: Any, config: BinwrapConfig) -> int:
    """List configured binaries and the sources used on this platform."""
    os_name, arch = current_platform()
    log(f"Configured binaries ({os_name}/{arch}):", "default", "🔧")
    for name in config.binaries:
        binary = config.binary_config(name)
        console.print(f"  [green]{name}[/green] -> {binary.path}")
        for source in match_sources(binary.sources, os_name, arch):
            console.print(f"    {source.url}")
    return 0


def ensure_binaries(args: argparse.Namespace, config: BinwrapConfig) -> int:
    """Make every requested binary available; return the exit status."""
    names = args.binaries or list(config.binaries)
    for name in names:
        if name not in config.binaries:
            log(f"Unknown binary: {name}", "error", "❌")
            return 1

    env = config.environment()
    failed = 0
    for name in names:
        try:
            path = run(config.binary_config(name), config.probe_args(name), env)
        except BinwrapError as e:
            log(f"{name}: {e.message}", "error", "❌")
            failed += 1
            continue
        log(f"{name} is ready at {path}", "success", "✅")

    if failed:
        log(f"{failed}/{len(names)} binaries failed", "error", "❌")
        return 1
    return 0


def print_path(args: argparse.Namespace, config: BinwrapConfig) -> int:
    """Print the path a configured binary is expected at."""
    if args.binary not in config.binaries:
        log(f"Unknown binary: {args.binary}", "error", "❌")
        return 1
    print(config.binary_config(args.binary).path)
    return 0


def print_version(_args: Any, _config: BinwrapConfig) -> int:
    console.print(f"[yellow]binwrap[/] [bold]v{__version__}[/]")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="binwrap - Find, fetch and check native binaries",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--dest",
        type=str,
        help="Root directory for binaries",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    list_parser = subparsers.add_parser("list", help="List configured binaries")
    list_parser.set_defaults(func=list_binaries)

    ensure_parser = subparsers.add_parser(
        "ensure",
        help="Find or fetch binaries and check that they work",
    )
    ensure_parser.add_argument(
        "binaries",
        nargs="*",
        help="Binaries to ensure (all if not specified)",
    )
    ensure_parser.set_defaults(func=ensure_binaries)

    path_parser = subparsers.add_parser("path", help="Print the path of a binary")
    path_parser.add_argument("binary", help="Name of a configured binary")
    path_parser.set_defaults(func=print_path)

    version_parser = subparsers.add_parser("version", help="Print version information")
    version_parser.set_defaults(func=print_version)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main function to parse arguments and execute commands."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = BinwrapConfig.load_from_file(args.config_file)
    if args.dest:
        config.destination = Path(args.dest)

    if not hasattr(args, "func"):
        parser.print_help()
        return

    sys.exit(args.func(args, config))


if __name__ == "__main__":
    main()
