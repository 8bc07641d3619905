#!/usr/bin/env python3
"""
Exceptions raised by setup-protoc.
"""

from typing import Optional


class SetupProtocError(Exception):
    """Base exception for setup-protoc operations."""
    pass


class ConfigurationError(SetupProtocError):
    """Inputs or configuration file could not be loaded or validated."""
    pass


class DownloadError(SetupProtocError):
    """Release archive download failed."""
    pass


class ToolNotFoundError(SetupProtocError):
    """A required executable is not on the PATH."""
    pass


class CommandError(SetupProtocError):
    """An external command failed or timed out."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ReleaseLookupError(SetupProtocError):
    """Upstream release metadata could not be fetched."""
    pass
