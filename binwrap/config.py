"""Configuration management for binwrap."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .check import DEFAULT_PROBE
from .utils import Environment, log

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION = "~/.binwrap/bin"


@dataclass(frozen=True)
class Source:
    """A download URL tagged with the platform it applies to."""

    url: str
    os: str | None = None
    arch: str | None = None


@dataclass(frozen=True)
class BinaryConfig:
    """Everything needed to make one binary available."""

    destination: Path
    binary: str
    sources: tuple[Source, ...] = ()
    version_range: str | None = None
    strip: int = 1
    global_search: bool = False

    @property
    def path(self) -> Path:
        """Absolute path of the binary inside the destination."""
        return Path(os.path.abspath(os.path.join(self.destination, self.binary)))


@dataclass
class BinwrapConfig:
    """Configuration for binwrap, usually read from ``binwrap.yaml``."""

    destination: Path = field(
        default_factory=lambda: Path(os.path.expanduser(DEFAULT_DESTINATION)),
    )
    strip: int = 1
    global_search: bool = False
    prefix: str | None = None
    binaries: dict[str, dict[str, Any]] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate the configuration."""
        for name, binary in self.binaries.items():
            self._validate_binary(name, binary)

    def _validate_binary(self, name: str, binary: dict[str, Any]) -> None:
        if "use" not in binary:
            log(f"Binary {name} is missing required field 'use'", "warning", "⚠️")
        sources = binary.get("sources") or []
        if not sources:
            log(f"Binary {name} has no 'sources' defined", "warning", "⚠️")
        for source in sources:
            if source.get("arch") and not source.get("os"):
                log(
                    f"Source {source.get('url')} of {name} sets 'arch' without 'os' and will never be used",
                    "warning",
                    "⚠️",
                )

    def environment(self) -> Environment:
        """Return the process environment with the configured prefix applied."""
        return Environment.from_os(prefix=self.prefix)

    def binary_config(self, name: str) -> BinaryConfig:
        """Build the ``BinaryConfig`` for a configured binary."""
        if name not in self.binaries:
            msg = f"Binary '{name}' not found in configuration"
            raise KeyError(msg)
        binary = self.binaries[name]
        dest = binary.get("dest")
        destination = Path(os.path.expanduser(dest)) if dest else self.destination / name
        sources = tuple(
            Source(url=s["url"], os=s.get("os"), arch=s.get("arch"))
            for s in binary.get("sources") or []
        )
        return BinaryConfig(
            destination=destination,
            binary=binary.get("use", name),
            sources=sources,
            version_range=binary.get("version"),
            strip=int(binary.get("strip", self.strip)),
            global_search=bool(binary.get("global", self.global_search)),
        )

    def probe_args(self, name: str) -> list[str]:
        """Return the probe command for a configured binary."""
        return list(self.binaries.get(name, {}).get("args") or DEFAULT_PROBE)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BinwrapConfig:
        """Create a configuration from a parsed YAML mapping."""
        destination = data.get("destination") or DEFAULT_DESTINATION
        prefix = data.get("prefix")
        config = cls(
            destination=Path(os.path.expanduser(str(destination))),
            strip=int(data.get("strip", 1)),
            global_search=bool(data.get("global", False)),
            prefix=os.path.expanduser(prefix) if prefix else None,
            binaries=data.get("binaries") or {},
        )
        config.validate()
        return config

    @classmethod
    def load_from_file(cls, config_path: str | Path | None = None) -> BinwrapConfig:
        """Load configuration from YAML file."""
        if not config_path:
            config_path = os.environ.get("BINWRAP_CONFIG", "binwrap.yaml")

        try:
            with open(config_path) as file:
                data = yaml.safe_load(file) or {}
        except FileNotFoundError:
            log(f"Configuration file not found: {config_path}", "warning", "⚠️")
            return cls()
        except yaml.YAMLError:
            log(
                f"Invalid YAML in configuration file: {config_path}",
                "error",
                "❌",
                print_exception=True,
            )
            return cls()

        logger.debug("Loaded configuration from %s", config_path)
        return cls.from_dict(data)
