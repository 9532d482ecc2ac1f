"""Error hierarchy shared by configuration, front end and mock generation."""

from __future__ import annotations

from typing import Optional


class GenMockError(RuntimeError):
    """Base class for fatal mock generation failures."""


class ConfigurationError(GenMockError):
    """Raised when the mock configuration is missing or malformed."""


class PathError(GenMockError):
    """Raised when an output path is relative where an absolute one is required."""


class FilesystemError(GenMockError):
    """Raised when an output directory or file cannot be created."""

    def __init__(self, message: str, path: str, cause: Optional[BaseException] = None):
        detail = f"{message} {path}"
        if cause is not None:
            detail = f"{detail}: {cause}"
        super().__init__(detail)
        self.path = path
        self.cause = cause
