"""Tests for binwrap.config."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml
from _pytest.capture import CaptureFixture

from binwrap.config import BinaryConfig, BinwrapConfig, Source


def _write_config(path: Path, data: dict) -> Path:
    path.write_text(yaml.safe_dump(data))
    return path


def test_binary_config_path(tmp_path: Path) -> None:
    """The binary path joins the destination and the relative path."""
    config = BinaryConfig(destination=tmp_path / "vendor", binary="bin/tool")
    assert config.path == tmp_path / "vendor" / "bin" / "tool"
    assert config.path.is_absolute()


def test_binary_config_is_frozen(tmp_path: Path) -> None:
    """A BinaryConfig can't be changed after it is built."""
    config = BinaryConfig(destination=tmp_path, binary="tool")
    with pytest.raises(AttributeError):
        config.binary = "other"  # type: ignore[misc]


def test_load_from_file(tmp_path: Path) -> None:
    """Binaries are read from YAML with global defaults applied."""
    config_path = _write_config(
        tmp_path / "binwrap.yaml",
        {
            "destination": str(tmp_path / "bins"),
            "strip": 2,
            "global": True,
            "prefix": "~/prefix",
            "binaries": {
                "mytool": {
                    "use": "bin/mytool",
                    "version": ">=2.0.0",
                    "args": ["-V"],
                    "sources": [
                        {"url": "https://example.com/mytool-darwin-x64.tar.gz", "os": "darwin", "arch": "x64"},
                        {"url": "https://example.com/mytool.tar.gz"},
                    ],
                },
                "other": {
                    "use": "other",
                    "dest": str(tmp_path / "custom"),
                    "strip": 0,
                    "global": False,
                    "sources": [{"url": "https://example.com/other"}],
                },
            },
        },
    )

    config = BinwrapConfig.load_from_file(config_path)

    assert config.prefix == os.path.expanduser("~/prefix")
    mytool = config.binary_config("mytool")
    assert mytool.destination == tmp_path / "bins" / "mytool"
    assert mytool.path == tmp_path / "bins" / "mytool" / "bin" / "mytool"
    assert mytool.sources == (
        Source("https://example.com/mytool-darwin-x64.tar.gz", "darwin", "x64"),
        Source("https://example.com/mytool.tar.gz"),
    )
    assert mytool.version_range == ">=2.0.0"
    assert mytool.strip == 2
    assert mytool.global_search is True
    assert config.probe_args("mytool") == ["-V"]

    other = config.binary_config("other")
    assert other.destination == tmp_path / "custom"
    assert other.strip == 0
    assert other.global_search is False
    assert config.probe_args("other") == ["--version"]


def test_unknown_binary(tmp_path: Path) -> None:
    """Asking for a binary that isn't configured raises KeyError."""
    with pytest.raises(KeyError):
        BinwrapConfig(destination=tmp_path).binary_config("missing")


def test_missing_file_gives_defaults(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    """A missing config file falls back to the defaults."""
    config = BinwrapConfig.load_from_file(tmp_path / "nope.yaml")
    assert config.binaries == {}
    assert config.destination == Path(os.path.expanduser("~/.binwrap/bin"))
    assert "Configuration file not found" in capsys.readouterr().out


def test_invalid_yaml_gives_defaults(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    """Broken YAML is reported and the defaults are used."""
    path = tmp_path / "binwrap.yaml"
    path.write_text("binaries: [unclosed\n")
    config = BinwrapConfig.load_from_file(path)
    assert config.binaries == {}
    assert "Invalid YAML" in capsys.readouterr().out


def test_validation_warnings(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    """Incomplete binaries and unreachable sources are warned about."""
    path = _write_config(
        tmp_path / "binwrap.yaml",
        {
            "binaries": {
                "nouse": {"sources": [{"url": "https://example.com/x", "arch": "x64"}]},
                "nosources": {"use": "tool"},
            },
        },
    )
    BinwrapConfig.load_from_file(path)
    out = " ".join(capsys.readouterr().out.split())
    assert "missing required field 'use'" in out
    assert "will never be used" in out
    assert "no 'sources' defined" in out


def test_environment_uses_prefix(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """The configured prefix ends up in the environment."""
    monkeypatch.delenv("BINWRAP_PREFIX", raising=False)
    monkeypatch.setenv("PATH", str(tmp_path))
    env = BinwrapConfig(prefix=str(tmp_path / "prefix")).environment()
    assert env.prefix == str(tmp_path / "prefix")
    assert env.path == (str(tmp_path),)
