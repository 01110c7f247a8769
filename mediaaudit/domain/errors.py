from pathlib import Path
from typing import Optional


class MediaAuditError(Exception):
    """Base class for all mediaaudit failures."""


class WalkError(MediaAuditError):
    """Raised when a path cannot be accessed during traversal; halts the walk."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed accessing path {str(path)!r}: {cause}")


class ProbeError(MediaAuditError):
    """Per-file probe failure. Never aborts the scan."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class ProbeProcessError(ProbeError):
    """mediainfo could not be launched, timed out or exited non-zero."""

    def __init__(self, path: Path, message: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(path, message)


class ProbeParseError(ProbeError):
    """mediainfo output did not match the seven-field contract."""
