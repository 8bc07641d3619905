"""
Pytest configuration and fixtures for setup-protoc tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, Generator

import pytest

from helpers import create_protoc_archive
from setup_protoc.toolcache import ToolCache


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--network",
        action="store_true",
        default=False,
        help="Run tests that talk to GitHub"
    )


def pytest_collection_modifyitems(config, items):
    """Skip network tests unless asked for."""
    if config.getoption("--network"):
        return
    skip_network = pytest.mark.skip(reason="need --network option to run")
    for item in items:
        if "network" in item.keywords:
            item.add_marker(skip_network)


@pytest.fixture
def work_dir() -> Generator[Path, None, None]:
    """Temporary directory holding cache and temp dirs."""
    with tempfile.TemporaryDirectory(prefix="setup-protoc-test-") as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def tool_cache(work_dir) -> ToolCache:
    """Tool cache rooted in the work dir."""
    return ToolCache(work_dir / "cache", work_dir / "temp")


@pytest.fixture
def protoc_archive(work_dir) -> Path:
    """A zip laid out like a protoc release."""
    return create_protoc_archive(work_dir / "protoc-3.15.0-linux-x86_64.zip")


@pytest.fixture
def environ() -> Dict[str, str]:
    """Environment snapshot with a fixed PATH and no runner variables."""
    return {"PATH": os.pathsep.join(["/usr/local/bin", "/usr/bin"])}
