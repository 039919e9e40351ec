"""Select the sources that apply to a platform."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .config import Source


def source_applies(source: Source, os_name: str, arch: str) -> bool:
    """Return True if ``source`` should be downloaded on ``os_name``/``arch``.

    A source tagged with an OS and an architecture must match both. A source
    tagged only with an OS covers every architecture of that OS. An untagged
    source applies everywhere. A source with an architecture but no OS is
    never used.
    """
    if source.os:
        return source.os == os_name and (not source.arch or source.arch == arch)
    return not source.arch


def match_sources(
    sources: Iterable[Source],
    os_name: str,
    arch: str,
) -> list[Source]:
    """Return the sources for ``os_name``/``arch``, keeping their order."""
    return [s for s in sources if source_applies(s, os_name, arch)]
