"""binwrap - Binary Wrapper.

Makes a native binary available to a Python tool without bundling it.
Looks for an existing copy in a local destination (and optionally on
PATH), downloads and unpacks the right platform variant when none is
found, and checks that the result runs and has an acceptable version.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import BinaryConfig, BinwrapConfig, Source
from .errors import (
    AcquisitionError,
    BinwrapError,
    FilesystemError,
    NotWorkingError,
    VersionMismatchError,
)
from .sources import match_sources
from .utils import Environment, current_platform, setup_logging
from .wrapper import BinWrapper, run

__all__ = [
    "AcquisitionError",
    "BinWrapper",
    "BinaryConfig",
    "BinwrapConfig",
    "BinwrapError",
    "Environment",
    "FilesystemError",
    "NotWorkingError",
    "Source",
    "VersionMismatchError",
    "current_platform",
    "match_sources",
    "run",
    "setup_logging",
]
