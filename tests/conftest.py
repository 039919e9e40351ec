"""Configuration for pytest fixtures used in binwrap tests."""

from __future__ import annotations

import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Callable

import pytest

from binwrap.utils import Environment


def write_script(
    path: Path,
    version: str = "1.0.0",
    exit_code: int = 0,
) -> Path:
    """Write an executable shell script that prints a version and exits."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'#!/bin/sh\necho "tool version {version}"\nexit {exit_code}\n')
    path.chmod(0o755)
    return path


@pytest.fixture
def make_binary() -> Callable[..., Path]:
    """Return a function that writes a fake binary."""
    return write_script


@pytest.fixture
def empty_env() -> Environment:
    """An environment with no PATH directories and no prefix."""
    return Environment(path=(), prefix=None)


@pytest.fixture
def create_dummy_archive() -> Callable[..., Path]:
    r"""Create an archive file with binary files for testing.

    Usage:
        archive_path = create_dummy_archive(
            dest_path=tmp_path / "test.tar.gz",
            binary_names=["mybinary", "lib/libfoo.so"],
            nested_dir="tool-1.0.0",
        )
    """

    def _create_archive(
        dest_path: Path,
        binary_names: str | list[str],
        archive_type: str = "tar.gz",
        version: str = "1.0.0",
        nested_dir: str | None = "tool-1.0.0",
    ) -> Path:
        if isinstance(binary_names, str):
            binary_names = [binary_names]

        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_path = Path(tmp_dir)
            bin_dir = tmp_path / nested_dir if nested_dir else tmp_path

            created_files = [write_script(bin_dir / name, version) for name in binary_names]

            if archive_type == "tar.gz":
                with tarfile.open(dest_path, "w:gz") as tar:
                    for file_path in created_files:
                        tar.add(file_path, arcname=str(file_path.relative_to(tmp_path)))
            elif archive_type == "zip":
                with zipfile.ZipFile(dest_path, "w") as zipf:
                    for file_path in created_files:
                        zipf.write(file_path, arcname=str(file_path.relative_to(tmp_path)))
            else:  # pragma: no cover
                msg = f"Unsupported archive type: {archive_type}"
                raise ValueError(msg)

            return dest_path

    return _create_archive
