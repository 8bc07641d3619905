"""
Install protoc in CI jobs and put it on the PATH.
"""

__version__ = "1.0.0"

from .errors import (
    CommandError,
    ConfigurationError,
    DownloadError,
    ReleaseLookupError,
    SetupProtocError,
    ToolNotFoundError,
)
from .installer import get_file_name, get_protoc, normalize_version
from .platform_info import Platform
from .toolcache import ToolCache

__all__ = [
    "CommandError",
    "ConfigurationError",
    "DownloadError",
    "Platform",
    "ReleaseLookupError",
    "SetupProtocError",
    "ToolCache",
    "ToolNotFoundError",
    "get_file_name",
    "get_protoc",
    "normalize_version",
]
