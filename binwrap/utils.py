"""Utility functions for binwrap."""

from __future__ import annotations

import os
import platform
import sys
from dataclasses import dataclass, field
from typing import Mapping

from rich.console import Console

# Initialize rich console
console = Console()

_VERBOSE = False

_STYLES = {
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "bold red",
    "default": "",
}


def setup_logging(verbose: bool = False) -> None:  # noqa: FBT001, FBT002
    """Configure whether ``info`` messages are shown."""
    global _VERBOSE  # noqa: PLW0603
    _VERBOSE = verbose


def log(
    message: str,
    level: str = "default",
    emoji: str = "",
    *,
    print_exception: bool = False,
) -> None:
    """Print a styled message to the console."""
    if level == "info" and not _VERBOSE:
        return
    style = _STYLES.get(level, "")
    prefix = f"{emoji} " if emoji else ""
    if style:
        console.print(f"{prefix}[{style}]{message}[/{style}]")
    else:
        console.print(f"{prefix}{message}")
    if print_exception:
        console.print_exception()


def normalize_arch(machine: str) -> str:
    """Map a machine name onto one of the ``x64``, ``arm`` or ``x86`` buckets."""
    machine = machine.lower()
    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    if machine.startswith(("arm", "aarch")):
        return "arm"
    return "x86"


def normalize_os(name: str) -> str:
    """Strip version suffixes such as ``freebsd13`` and map cygwin onto win32."""
    if name.startswith("linux"):
        return "linux"
    if name.startswith("freebsd"):
        return "freebsd"
    if name in ("cygwin", "msys"):
        return "win32"
    return name


def current_platform() -> tuple[str, str]:
    """Detect the current platform and architecture."""
    return normalize_os(sys.platform), normalize_arch(platform.machine())


@dataclass(frozen=True)
class Environment:
    """The parts of the process environment the pipeline reads.

    ``path`` holds the ``PATH`` directories in search order. ``prefix`` is the
    install prefix of the host tool; its ``bin`` directory is where a global
    install of the binary itself would live.
    """

    path: tuple[str, ...] = field(default_factory=tuple)
    prefix: str | None = None

    @classmethod
    def from_os(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str | None = None,
    ) -> Environment:
        """Build an environment from ``os.environ`` (or the given mapping)."""
        if environ is None:
            environ = os.environ
        dirs = tuple(d for d in environ.get("PATH", "").split(os.pathsep) if d)
        prefix = environ.get("BINWRAP_PREFIX") or prefix
        if prefix:
            prefix = os.path.expanduser(prefix)
        return cls(path=dirs, prefix=prefix)

    @property
    def prefix_bin(self) -> str:
        """Search path used to find a global install of the binary itself."""
        if not self.prefix:
            return ""
        return os.path.join(self.prefix, "bin")
