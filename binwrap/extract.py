"""Extract downloaded archives into a destination directory."""

from __future__ import annotations

import bz2
import gzip
import logging
import lzma
import shutil
import tarfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import IO, Callable

logger = logging.getLogger(__name__)

TAR_SUFFIXES = (".tar", ".tar.gz", ".tgz", ".tar.bz2", ".tbz", ".tbz2", ".tar.xz", ".txz")

_DECOMPRESSORS: dict[str, Callable[[str], IO[bytes]]] = {
    ".gz": lambda p: gzip.open(p, "rb"),
    ".bz2": lambda p: bz2.open(p, "rb"),
    ".xz": lambda p: lzma.open(p, "rb"),
}


class ExtractionError(Exception):
    """Error during extraction process."""

    def __init__(self, message: str) -> None:
        """Initialize the ExtractionError."""
        self.message = message
        super().__init__(message)


def strip_components(name: str, strip: int) -> str | None:
    """Drop the first ``strip`` path segments of an archive member name.

    Returns None when nothing is left of the name.
    """
    parts = [p for p in PurePosixPath(name.replace("\\", "/")).parts if p not in ("/", ".")]
    parts = parts[strip:]
    if not parts:
        return None
    if ".." in parts:
        msg = f"Archive member {name} points outside the destination"
        raise ExtractionError(msg)
    return "/".join(parts)


def _target(dest_dir: Path, relative: str) -> Path:
    parent = (dest_dir / relative).parent.resolve()
    if parent != dest_dir and dest_dir not in parent.parents:
        msg = f"Archive member {relative} points outside the destination"
        raise ExtractionError(msg)
    return dest_dir / relative


def _write_file(source: IO[bytes], path: Path, mode: int) -> None:
    """Write data to a file with specified permissions."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.is_symlink():
        path.unlink()
    with open(path, "wb") as f:
        shutil.copyfileobj(source, f)
    path.chmod(mode)


def _extract_tar(archive_path: Path, dest_dir: Path, strip: int, mode: int) -> list[Path]:
    written = []
    with tarfile.open(archive_path, mode="r:*") as tar:
        for member in tar.getmembers():
            relative = strip_components(member.name, strip)
            if relative is None:
                continue
            target = _target(dest_dir, relative)
            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
            elif member.issym():
                target.parent.mkdir(parents=True, exist_ok=True)
                if target.is_symlink() or target.exists():
                    target.unlink()
                target.symlink_to(member.linkname)
                written.append(target)
            elif member.isfile() or member.islnk():
                data = tar.extractfile(member)
                if data is None:
                    continue
                with data:
                    _write_file(data, target, mode)
                written.append(target)
            else:
                logger.debug("Skipping special archive member %s", member.name)
    return written


def _extract_zip(archive_path: Path, dest_dir: Path, strip: int, mode: int) -> list[Path]:
    written = []
    with zipfile.ZipFile(archive_path) as zip_file:
        for info in zip_file.infolist():
            relative = strip_components(info.filename, strip)
            if relative is None:
                continue
            target = _target(dest_dir, relative)
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            with zip_file.open(info) as data:
                _write_file(data, target, mode)
            written.append(target)
    return written


def _extract_single_file(
    archive_path: Path,
    dest_dir: Path,
    filename: str,
    mode: int,
) -> list[Path]:
    """Place a file that is not an archive, decompressing it if needed."""
    for suffix, opener in _DECOMPRESSORS.items():
        if filename.endswith(suffix):
            target = _target(dest_dir, filename[: -len(suffix)])
            with opener(str(archive_path)) as data:
                _write_file(data, target, mode)
            return [target]

    target = _target(dest_dir, filename)
    with open(archive_path, "rb") as data:
        _write_file(data, target, mode)
    return [target]


def extract_archive(
    archive_path: str | Path,
    dest_dir: str | Path,
    filename: str | None = None,
    strip: int = 1,
    mode: int = 0o755,
) -> list[Path]:
    """Extract ``archive_path`` into ``dest_dir``.

    Args:
        archive_path: The downloaded file
        dest_dir: Directory to extract into, created if missing
        filename: Name used to guess the archive type (defaults to the file name)
        strip: Leading path segments removed from every archive member
        mode: Permission bits given to every extracted file

    Returns:
        The paths written

    Raises:
        ExtractionError: If the archive is corrupt or unsafe

    """
    archive_path = Path(archive_path)
    filename = filename or archive_path.name

    try:
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        dest_dir = dest_dir.resolve()
        if filename.endswith(TAR_SUFFIXES) or tarfile.is_tarfile(archive_path):
            return _extract_tar(archive_path, dest_dir, strip, mode)
        if filename.endswith(".zip") or zipfile.is_zipfile(archive_path):
            return _extract_zip(archive_path, dest_dir, strip, mode)
        return _extract_single_file(archive_path, dest_dir, filename, mode)
    except ExtractionError:
        raise
    except (tarfile.TarError, zipfile.BadZipFile, OSError, EOFError, lzma.LZMAError) as e:
        msg = f"Failed to extract {filename}: {e}"
        raise ExtractionError(msg) from e
