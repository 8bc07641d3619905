#!/usr/bin/env python3
"""
Configuration resolution for setup-protoc.

Settings come from three layers, later ones winning:
- an optional YAML configuration file
- GitHub Actions inputs (INPUT_* environment variables)
- command line flags

Runner directories (temp and tool cache) are resolved from an explicit
environment snapshot so nothing is read at import time.
"""

import os
import ntpath
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .errors import ConfigurationError

TRUE_VALUES = ("true", "yes", "1", "on")
FALSE_VALUES = ("false", "no", "0", "off", "")

# Keys accepted in the YAML file and their action input names
INPUT_NAMES = {
    "version": "VERSION",
    "include_prereleases": "INCLUDE-PRE-RELEASES",
    "repo_token": "REPO-TOKEN",
}


@dataclass
class SetupConfig:
    """Resolved settings for a single run."""
    version: str
    temp_dir: str
    cache_root: str
    include_prereleases: bool = False
    repo_token: str = ""
    log_level: str = "INFO"
    log_format: str = "text"


def _base_location(environ: Mapping[str, str], system: str) -> str:
    if system == "windows":
        # On windows use the USERPROFILE env variable
        return environ.get("USERPROFILE") or "C:\\"
    if system == "darwin":
        return "/Users"
    return "/home"


def _join(system: str, *parts: str) -> str:
    join = ntpath.join if system == "windows" else posixpath.join
    return join(*parts)


def resolve_temp_directory(environ: Mapping[str, str], system: str) -> str:
    """
    Resolve the directory used for downloads and extraction.

    Args:
        environ: Environment snapshot
        system: Platform OS name ("windows", "darwin" or "linux")

    Returns:
        RUNNER_TEMP when set, otherwise <base>/actions/temp
    """
    temp_dir = environ.get("RUNNER_TEMP", "")
    if temp_dir:
        return temp_dir
    return _join(system, _base_location(environ, system), "actions", "temp")


def resolve_cache_root(environ: Mapping[str, str], system: str) -> str:
    """
    Resolve the root directory of the tool cache.

    Args:
        environ: Environment snapshot
        system: Platform OS name ("windows", "darwin" or "linux")

    Returns:
        RUNNER_TOOL_CACHE when set, otherwise <base>/actions/cache
    """
    cache_root = environ.get("RUNNER_TOOL_CACHE", "")
    if cache_root:
        return cache_root
    return _join(system, _base_location(environ, system), "actions", "cache")


def parse_bool(value: Union[str, bool, None], name: str = "value") -> bool:
    """Parse a boolean input the way action inputs are written."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    normalized = str(value).strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load settings from a YAML file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Mapping of setting names to values

    Raises:
        ConfigurationError: If the file is missing or not a YAML mapping
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML configuration: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration must be a mapping: {config_path}")

    unknown = set(data) - set(INPUT_NAMES) - {"logging"}
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

    # Unquoted versions load as numbers and lose digits, e.g. 21.10 -> 21.1
    version = data.get("version")
    if version is not None and not isinstance(version, str):
        raise ConfigurationError(
            f"version must be a string, quote it in {config_path}: version: \"{version}\""
        )

    logging_settings = data.get("logging")
    if logging_settings is not None and not isinstance(logging_settings, dict):
        raise ConfigurationError(
            f"logging must be a mapping with level and format keys: {config_path}"
        )

    return data


def read_action_inputs(environ: Mapping[str, str]) -> Dict[str, str]:
    """Collect the action inputs that are set and non-empty."""
    inputs = {}
    for key, input_name in INPUT_NAMES.items():
        value = environ.get(f"INPUT_{input_name}", "")
        if value.strip():
            inputs[key] = value.strip()
    return inputs


def load_config(
    system: str,
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SetupConfig:
    """
    Resolve the settings for a run.

    Args:
        system: Platform OS name used for directory fallbacks
        environ: Environment snapshot (defaults to os.environ)
        config_path: Optional YAML configuration file
        overrides: Values given on the command line; None entries are ignored

    Returns:
        Resolved SetupConfig

    Raises:
        ConfigurationError: If the file is invalid or no version is given
    """
    if environ is None:
        environ = os.environ

    settings: Dict[str, Any] = {}
    logging_settings: Dict[str, Any] = {}
    if config_path:
        file_settings = load_config_file(config_path)
        logging_settings = file_settings.pop("logging", None) or {}
        settings.update(file_settings)

    settings.update(read_action_inputs(environ))
    settings.update({k: v for k, v in (overrides or {}).items() if v is not None})

    version = str(settings.get("version") or "").strip()
    if not version:
        raise ConfigurationError("A protoc version is required")

    log_level = logging_settings.get("level", "INFO")
    if environ.get("RUNNER_DEBUG") == "1":
        log_level = "DEBUG"
    log_format = logging_settings.get("format")
    if not log_format:
        log_format = "actions" if environ.get("GITHUB_ACTIONS") == "true" else "text"

    return SetupConfig(
        version=version,
        include_prereleases=parse_bool(settings.get("include_prereleases"), "include_prereleases"),
        repo_token=str(settings.get("repo_token") or ""),
        temp_dir=resolve_temp_directory(environ, system),
        cache_root=resolve_cache_root(environ, system),
        log_level=str(log_level).upper(),
        log_format=log_format,
    )
