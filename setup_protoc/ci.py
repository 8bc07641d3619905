#!/usr/bin/env python3
"""
CI runner integration for setup-protoc.

Provides PATH propagation to later job steps, executable lookup, synchronous
command execution and logging that renders as GitHub workflow commands.
"""

import logging
import os
import shutil
import subprocess
import sys
from typing import List, MutableMapping, Optional

from .errors import CommandError, ToolNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 60


class ActionsFormatter(logging.Formatter):
    """Render log records as GitHub Actions workflow commands."""

    COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Workflow commands are single line, escape as the runner expects
        message = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{message}"


def setup_logging(level: str = "INFO", fmt: str = "text") -> logging.Logger:
    """
    Set up logging for the setup_protoc package.

    Args:
        level: Logging level name
        fmt: "actions" for workflow commands, anything else for plain text

    Returns:
        The package logger
    """
    package_logger = logging.getLogger("setup_protoc")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Replace handlers from a previous call
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout if fmt == "actions" else sys.stderr)
    if fmt == "actions":
        handler.setFormatter(ActionsFormatter("%(message)s"))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] setup-protoc: %(message)s"
        ))
    package_logger.addHandler(handler)
    package_logger.propagate = False

    return package_logger


def add_path(entry: str, environ: Optional[MutableMapping[str, str]] = None) -> None:
    """
    Append a directory to the PATH of this process and of later job steps.

    Existing PATH entries keep their order and the new entry goes last. When
    GITHUB_PATH names a file the entry is also appended to it so the runner
    carries it into the following steps. An entry already on the PATH is
    left out of both.

    Args:
        entry: Directory to add
        environ: Environment to mutate (defaults to os.environ)
    """
    if environ is None:
        environ = os.environ

    current = environ.get("PATH", "")
    entries = current.split(os.pathsep) if current else []
    if entry in entries:
        logger.debug(f"Already on PATH: {entry}")
        return

    entries.append(entry)
    environ["PATH"] = os.pathsep.join(entries)

    path_file = environ.get("GITHUB_PATH", "")
    if path_file:
        # text mode translates the newline
        with open(path_file, "a", encoding="utf-8") as f:
            f.write(entry + "\n")

    logger.debug(f"Added to PATH: {entry}")


def which(tool: str, required: bool = False, path: Optional[str] = None) -> str:
    """
    Look up an executable on the PATH.

    Args:
        tool: Executable name
        required: Raise instead of returning "" when the tool is missing
        path: Search path override (defaults to the PATH of this process)

    Returns:
        Full path to the executable, or "" when not found and not required

    Raises:
        ToolNotFoundError: If required and the tool is missing
    """
    found = shutil.which(tool, path=path)
    if found:
        return found
    if required:
        raise ToolNotFoundError(f"Unable to locate executable file: {tool}")
    return ""


def run_command(args: List[str], timeout: int = DEFAULT_COMMAND_TIMEOUT) -> str:
    """
    Run a command to completion and return its trimmed standard output.

    Args:
        args: Command and arguments
        timeout: Seconds to wait before giving up

    Returns:
        Captured stdout with surrounding whitespace removed

    Raises:
        CommandError: If the command cannot start, times out or exits non-zero
    """
    logger.debug(f"Running: {' '.join(args)}")
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise CommandError(
            f"Command {args[0]} failed with exit code {e.returncode}: {(e.stderr or '').strip()}",
            returncode=e.returncode,
            stderr=e.stderr or "",
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"Command {args[0]} timed out after {timeout}s") from e
    except OSError as e:
        raise CommandError(f"Failed to run {args[0]}: {e}") from e

    return result.stdout.strip()
