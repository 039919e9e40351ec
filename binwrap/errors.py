"""Exceptions raised while resolving, acquiring and verifying binaries."""

from __future__ import annotations


class BinwrapError(Exception):
    """Base class for binwrap errors."""

    def __init__(self, message: str) -> None:
        """Initialize the BinwrapError."""
        self.message = message
        super().__init__(message)


class FilesystemError(BinwrapError):
    """Checking for an existing binary or linking a global one failed."""


class AcquisitionError(BinwrapError):
    """Downloading or extracting a source archive failed."""


class NotWorkingError(BinwrapError):
    """The binary was executed but did not behave as expected."""

    def __init__(self, binary: str) -> None:
        """Initialize the NotWorkingError."""
        self.binary = binary
        super().__init__(f"The `{binary}` binary doesn't seem to work correctly")


class VersionMismatchError(BinwrapError):
    """The binary works but its version is outside the requested range."""

    def __init__(
        self,
        binary: str,
        version_range: str,
        found: str | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize the VersionMismatchError."""
        self.binary = binary
        self.version_range = version_range
        self.found = found
        if message is None:
            if found is None:
                message = f"Couldn't find version of `{binary}`"
            else:
                message = f"{binary} {found} doesn't satisfy the version requirement of {version_range}"
        super().__init__(message)
