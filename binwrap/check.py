"""Check that a binary runs and has an acceptable version."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Sequence

from .errors import NotWorkingError, VersionMismatchError
from .utils import log
from .versions import find_version, satisfies

logger = logging.getLogger(__name__)

DEFAULT_PROBE = ("--version",)


def check_binary(path: str | Path, args: Sequence[str] = DEFAULT_PROBE) -> bool:
    """Return True if ``path`` runs with ``args`` and exits successfully."""
    path = str(path)
    if not os.path.isfile(path) or not os.access(path, os.X_OK):
        logger.debug("%s is not an executable file", path)
        return False
    try:
        result = subprocess.run(
            [path, *args],
            capture_output=True,
            check=False,
        )
    except OSError as e:
        logger.debug("Failed to run %s: %s", path, e)
        return False
    return result.returncode == 0


def get_version(path: str | Path, args: Sequence[str] = DEFAULT_PROBE) -> str | None:
    """Run the binary and return the version it reports, if any."""
    try:
        result = subprocess.run(
            [str(path), *args],
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        logger.debug("Failed to run %s: %s", path, e)
        return None
    output = result.stdout.strip() or result.stderr.strip()
    return find_version(output)


def check_version(path: str | Path, version_range: str) -> str:
    """Raise ``VersionMismatchError`` unless the binary is in ``version_range``.

    Returns the version that was found.
    """
    name = os.path.basename(str(path))
    version = get_version(path)
    if version is None:
        raise VersionMismatchError(name, version_range)
    try:
        ok = satisfies(version, version_range)
    except ValueError as e:
        msg = f"Invalid version range {version_range!r} for `{name}`: {e}"
        raise VersionMismatchError(name, version_range, version, msg) from e
    if not ok:
        raise VersionMismatchError(name, version_range, version)
    return version


def verify(
    path: str | Path,
    cmd: Sequence[str] | None = None,
    version_range: str | None = None,
) -> None:
    """Run the probe command and, if given, check the version range."""
    name = os.path.basename(str(path))
    if not check_binary(path, DEFAULT_PROBE if cmd is None else cmd):
        raise NotWorkingError(name)

    if version_range:
        version = check_version(path, version_range)
        log(f"{name} {version} satisfies {version_range}", "info", "✅")
