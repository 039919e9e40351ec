"""Download and extraction of binary sources."""

from __future__ import annotations

import concurrent.futures
import logging
import posixpath
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple
from urllib.parse import unquote, urlparse

import requests

from .errors import AcquisitionError
from .extract import ExtractionError, extract_archive
from .sources import match_sources
from .utils import current_platform, log

if TYPE_CHECKING:
    from .config import BinaryConfig, Source

logger = logging.getLogger(__name__)

DEFAULT_MODE = 0o755
MAX_WORKERS = 8


class DownloadTask(NamedTuple):
    """Represents a single download task."""

    source: Source
    filename: str
    temp_path: Path


def filename_from_url(url: str) -> str:
    """Return the last path segment of ``url``."""
    name = posixpath.basename(unquote(urlparse(url).path))
    return name or "download"


def download_file(url: str, destination: str) -> str:
    """Download a file from a URL to a destination path."""
    log(f"Downloading from {url}", "info", "📥")
    try:
        response = requests.get(url, stream=True, timeout=30)
        response.raise_for_status()

        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                f.write(chunk)

        return destination
    except requests.RequestException as e:
        msg = f"Failed to download {url}: {e}"
        raise AcquisitionError(msg) from e


def prepare_download_tasks(sources: list[Source], temp_dir: Path) -> list[DownloadTask]:
    """Give every source its own file in ``temp_dir``."""
    tasks = []
    for i, source in enumerate(sources):
        filename = filename_from_url(source.url)
        tasks.append(DownloadTask(source, filename, temp_dir / f"{i}-{filename}"))
    return tasks


def download_task(task: DownloadTask) -> tuple[DownloadTask, Exception | None]:
    """Download a file for a DownloadTask."""
    try:
        download_file(task.source.url, str(task.temp_path))
    except (AcquisitionError, OSError) as e:
        log(f"Error downloading {task.filename}: {e!s}", "error", "❌")
        return task, e
    return task, None


def _download_files_in_parallel(
    tasks: list[DownloadTask],
) -> list[tuple[DownloadTask, Exception | None]]:
    """Download files in parallel using ThreadPoolExecutor."""
    with concurrent.futures.ThreadPoolExecutor(
        max_workers=min(MAX_WORKERS, len(tasks) or 1),
    ) as executor:
        return list(executor.map(download_task, tasks))


def _fetch_and_extract(config: BinaryConfig, sources: list[Source], mode: int) -> list[Path]:
    with tempfile.TemporaryDirectory() as tmp:
        tasks = prepare_download_tasks(sources, Path(tmp))
        results = _download_files_in_parallel(tasks)
        for task, error in results:
            if error is not None:
                msg = f"Failed to fetch {task.source.url}: {error}"
                raise AcquisitionError(msg) from error

        written: list[Path] = []
        for task in tasks:
            try:
                written.extend(
                    extract_archive(
                        task.temp_path,
                        config.destination,
                        filename=task.filename,
                        strip=config.strip,
                        mode=mode,
                    ),
                )
            except ExtractionError as e:
                msg = f"Failed to extract {task.source.url}: {e.message}"
                raise AcquisitionError(msg) from e
            log(f"Extracted {task.filename} to {config.destination}", "success", "✅")
    return written


def acquire(
    config: BinaryConfig,
    platform: tuple[str, str] | None = None,
    mode: int = DEFAULT_MODE,
) -> list[Path]:
    """Download and extract every source that applies to ``platform``.

    All downloads finish before anything is extracted. The first failure, in
    source order, is raised as an ``AcquisitionError``.
    """
    os_name, arch = platform or current_platform()
    sources = match_sources(config.sources, os_name, arch)
    if not sources:
        msg = f"No source available for {os_name}/{arch}"
        raise AcquisitionError(msg)

    log(f"Fetching {len(sources)} source(s) into {config.destination}", "info", "🔄")
    try:
        written = _fetch_and_extract(config, sources, mode)
    except OSError as e:
        msg = f"Failed to acquire {config.path.name}: {e}"
        raise AcquisitionError(msg) from e

    logger.debug("Acquired %d file(s) for %s", len(written), config.path)
    return written
