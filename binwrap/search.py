"""Find an existing copy of a binary and link global installs locally."""

from __future__ import annotations

import glob
import logging
import os
import shutil
from typing import TYPE_CHECKING, Iterable

from .errors import FilesystemError
from .utils import log

if TYPE_CHECKING:
    from .config import BinaryConfig
    from .utils import Environment

logger = logging.getLogger(__name__)


def _same_path(a: str, b: str) -> bool:
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))


def candidate_paths(config: BinaryConfig, env: Environment) -> list[str]:
    """Return the paths to check: the local path, then one per PATH directory."""
    local = str(config.path)
    paths = [local]
    if config.global_search:
        basename = os.path.basename(local)
        paths.extend(os.path.join(d, basename) for d in env.path)
    return paths


def find_existing(paths: Iterable[str]) -> list[str]:
    """Return the paths that exist on disk, in order and without duplicates."""
    found: list[str] = []
    for path in paths:
        try:
            matches = glob.glob(glob.escape(path))
        except OSError as e:
            msg = f"Failed to check {path}: {e}"
            raise FilesystemError(msg) from e
        for match in matches:
            if not os.path.exists(match):
                logger.debug("Skipping dangling link %s", match)
                continue
            if not any(_same_path(match, f) for f in found):
                found.append(match)
    return found


def is_self(candidate: str, basename: str, env: Environment) -> bool:
    """Return True if ``candidate`` is the global install of the binary itself.

    That is the copy a bare ``basename`` command resolves to from the install
    prefix. When no such copy exists there is nothing to conflict with.
    """
    resolved = shutil.which(basename, path=env.prefix_bin)
    if resolved is None:
        return False
    return _same_path(candidate, resolved)


def search(config: BinaryConfig, env: Environment) -> str | None:
    """Return the first existing copy of the binary, or None."""
    files = find_existing(candidate_paths(config, env))

    if config.global_search:
        basename = os.path.basename(str(config.path))
        others = [f for f in files if not is_self(f, basename, env)]
        if others or not files:
            files = others
        else:
            logger.debug("Only the global install of %s was found, using it", basename)

    location = files[0] if files else None
    logger.debug("Search for %s found %s", config.path, location)
    return location


def is_global(location: str, env: Environment) -> bool:
    """Return True if ``location`` sits directly in one of the PATH directories."""
    parent = os.path.dirname(location)
    return any(_same_path(parent, d) for d in env.path)


def link_global(location: str, config: BinaryConfig, env: Environment) -> bool:
    """Symlink a global ``location`` to the local binary path.

    Returns True if a link was created. Existing files at the local path are
    replaced.
    """
    link_path = config.path
    if _same_path(location, str(link_path)) or not is_global(location, env):
        return False

    try:
        link_path.parent.mkdir(parents=True, exist_ok=True)
        if link_path.is_symlink() or link_path.exists():
            link_path.unlink()
        link_path.symlink_to(location)
    except OSError as e:
        msg = f"Failed to link {location} to {link_path}: {e}"
        raise FilesystemError(msg) from e

    log(f"Linked global {location} to {link_path}", "info", "🔗")
    return True


def locate(config: BinaryConfig, env: Environment) -> str | None:
    """Search for the binary, linking it locally when it is a global install."""
    location = search(config, env)
    if config.global_search and location:
        link_global(location, config, env)
    return location
