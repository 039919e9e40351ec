"""Make sure a binary is available: find it, fetch it if needed, then test it."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from .check import DEFAULT_PROBE, verify
from .config import BinaryConfig, Source
from .download import acquire
from .errors import BinwrapError
from .search import locate
from .utils import Environment, log

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """State of a single run."""

    basename: str
    location: str | None = None
    acquired: bool = False


def run(
    config: BinaryConfig,
    cmd: Sequence[str] | None = None,
    env: Environment | None = None,
    platform: tuple[str, str] | None = None,
) -> Path:
    """Find or fetch the binary described by ``config`` and check that it works.

    The steps run in order and the first failure stops the run:

    1. search the destination (and PATH, with ``global_search``) for a copy,
       linking a global copy into the destination;
    2. download and extract the matching sources if nothing was found;
    3. run the binary with ``cmd`` (``--version`` by default) and check the
       version range.

    Returns:
        The absolute path of the binary

    Raises:
        BinwrapError: The subclass tells which step failed

    """
    if cmd is None:
        cmd = DEFAULT_PROBE
    if env is None:
        env = Environment.from_os()

    path = config.path
    ctx = RunContext(basename=os.path.basename(path))

    ctx.location = locate(config, env)
    if ctx.location is None:
        log(f"{ctx.basename} not found, fetching it", "info", "🔍")
        acquire(config, platform)
        ctx.acquired = True
    else:
        log(f"Found {ctx.basename} at {ctx.location}", "info", "✅")

    verify(path, cmd, config.version_range)
    how = "downloaded" if ctx.acquired else "found"
    log(f"{ctx.basename} ready at {path} ({how})", "info", "✅")
    logger.debug("Run for %s finished: %s", ctx.basename, ctx)
    return path


def _check_strip(count: int) -> int:
    if count < 0:
        msg = f"strip must be 0 or more, got {count}"
        raise ValueError(msg)
    return count


class BinWrapper:
    """Builder for a ``BinaryConfig`` with a ``run`` shortcut.

    Example::

        BinWrapper(global_search=True)
            .src("https://example.com/tool-darwin.tar.gz", "darwin")
            .src("https://example.com/tool-linux-x64.tar.gz", "linux", "x64")
            .dest("vendor")
            .use("tool")
            .version(">=1.4.0")
            .run()
    """

    def __init__(self, strip: int = 1, global_search: bool = False) -> None:  # noqa: FBT001, FBT002
        self._sources: list[Source] = []
        self._dest: str | None = None
        self._use: str | None = None
        self._version: str | None = None
        self._strip = _check_strip(strip)
        self._global_search = global_search

    def src(self, url: str, os: str | None = None, arch: str | None = None) -> BinWrapper:  # noqa: A002
        """Add a source, optionally limited to an OS and architecture."""
        self._sources.append(Source(url=url, os=os, arch=arch))
        return self

    def dest(self, path: str | Path) -> BinWrapper:
        """Set the directory the binary lives in."""
        self._dest = str(path)
        return self

    def use(self, binary: str) -> BinWrapper:
        """Set the binary path relative to the destination."""
        self._use = binary
        return self

    def version(self, version_range: str) -> BinWrapper:
        """Set the version range the binary must satisfy."""
        self._version = version_range
        return self

    def strip(self, count: int) -> BinWrapper:
        """Set how many leading directories to drop from archive members."""
        self._strip = _check_strip(count)
        return self

    def global_search(self, enabled: bool = True) -> BinWrapper:  # noqa: FBT001, FBT002
        """Also look for the binary in the PATH directories."""
        self._global_search = enabled
        return self

    @property
    def sources(self) -> list[Source]:
        return list(self._sources)

    @property
    def destination(self) -> str | None:
        return self._dest

    @property
    def binary(self) -> str | None:
        return self._use

    @property
    def version_range(self) -> str | None:
        return self._version

    def build(self) -> BinaryConfig:
        """Return the configured ``BinaryConfig``."""
        if self._dest is None or self._use is None:
            msg = "Both dest() and use() must be set"
            raise ValueError(msg)
        return BinaryConfig(
            destination=Path(self._dest),
            binary=self._use,
            sources=tuple(self._sources),
            version_range=self._version,
            strip=self._strip,
            global_search=self._global_search,
        )

    def path(self) -> Path:
        """Absolute path of the binary."""
        return self.build().path

    def run(
        self,
        cmd: Sequence[str] | None = None,
        callback: Callable[[BinwrapError | None], None] | None = None,
        env: Environment | None = None,
    ) -> Path | None:
        """Run the pipeline for the configured binary.

        Without a ``callback`` errors are raised. With one, the callback gets
        the error (or None on success) and nothing is raised.
        """
        config = self.build()
        if callback is None:
            return run(config, cmd, env)
        try:
            path = run(config, cmd, env)
        except BinwrapError as e:
            callback(e)
            return None
        callback(None)
        return path
