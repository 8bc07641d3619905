#!/usr/bin/env python3
"""
Local tool cache for setup-protoc.

Installed tools live under <cache_root>/<tool>/<version>/<arch>/ with a
sibling "<arch>.complete" marker. A directory without its marker is a
partial install and is treated as missing.
"""

import logging
import os
import shutil
import stat
import uuid
import zipfile
from pathlib import Path
from typing import Optional, Union

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "setup-protoc"
DOWNLOAD_TIMEOUT = 300
CHUNK_SIZE = 8192


class ToolCache:
    """Find, download, extract and register tool installations."""

    def __init__(self, cache_root: Union[str, Path], temp_dir: Union[str, Path],
                 session: Optional[requests.Session] = None):
        """
        Initialize the tool cache.

        Args:
            cache_root: Root directory holding cached tools
            temp_dir: Directory for downloads and extraction
            session: HTTP session to download with
        """
        self.cache_root = Path(cache_root)
        self.temp_dir = Path(temp_dir)
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def _entry_dir(self, tool: str, version: str, arch: str) -> Path:
        return self.cache_root / tool / version / arch

    def _marker(self, tool: str, version: str, arch: str) -> Path:
        return self.cache_root / tool / version / f"{arch}.complete"

    def find(self, tool: str, version: str, arch: str) -> str:
        """
        Look up a cached installation.

        Args:
            tool: Tool name
            version: Version key
            arch: Architecture key

        Returns:
            Path of the installation, or "" when it is not cached
        """
        if not tool:
            raise ValueError("tool parameter is required")
        if not version:
            raise ValueError("version parameter is required")

        entry = self._entry_dir(tool, version, arch)
        if entry.is_dir() and self._marker(tool, version, arch).exists():
            logger.debug(f"Found tool in cache {tool} {version} {arch}")
            return str(entry)

        logger.debug(f"Tool not in cache {tool} {version} {arch}")
        return ""

    def download_tool(self, url: str) -> str:
        """
        Download a file to a fresh path in the temp dir.

        Args:
            url: URL to download

        Returns:
            Path to the downloaded file

        Raises:
            requests.RequestException: On connection or HTTP errors
        """
        dest_path = self.temp_dir / str(uuid.uuid4())
        dest_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug(f"Downloading {url} to {dest_path}")
        try:
            with self.session.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as response:
                response.raise_for_status()
                with open(dest_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except Exception:
            if dest_path.exists():
                dest_path.unlink()
            raise

        logger.debug(f"Downloaded {dest_path.stat().st_size:,} bytes")
        return str(dest_path)

    def extract_zip(self, archive: Union[str, Path]) -> str:
        """
        Extract a zip archive into a fresh directory in the temp dir.

        Args:
            archive: Path to the archive

        Returns:
            Path to the extraction directory

        Raises:
            zipfile.BadZipFile: If the archive is not a valid zip file
        """
        dest_dir = self.temp_dir / str(uuid.uuid4())
        dest_dir.mkdir(parents=True, exist_ok=True)

        logger.debug(f"Extracting {archive} to {dest_dir}")
        with zipfile.ZipFile(archive, "r") as zip_ref:
            zip_ref.extractall(dest_dir)

        # zipfile drops permission bits, protoc has to stay executable
        if os.name != "nt":
            bin_dir = dest_dir / "bin"
            if bin_dir.is_dir():
                for binary in bin_dir.iterdir():
                    if binary.is_file():
                        mode = binary.stat().st_mode
                        binary.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

        return str(dest_dir)

    def cache_dir(self, source_dir: Union[str, Path], tool: str, version: str, arch: str) -> str:
        """
        Copy a directory into the cache.

        Args:
            source_dir: Directory holding the installation
            tool: Tool name
            version: Version key
            arch: Architecture key

        Returns:
            Path of the cached installation
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise ValueError(f"Not a directory: {source_dir}")

        logger.debug(f"Caching tool {tool} {version} {arch}")
        entry = self._entry_dir(tool, version, arch)
        marker = self._marker(tool, version, arch)

        # Replace any previous or partial install of the same key
        marker.unlink(missing_ok=True)
        if entry.exists():
            shutil.rmtree(entry)
        entry.parent.mkdir(parents=True, exist_ok=True)

        shutil.copytree(source_dir, entry)
        marker.write_text("")

        logger.debug(f"Cached {tool} {version} at {entry}")
        return str(entry)

    def remove(self, path: Union[str, Path]) -> None:
        """Delete a downloaded file or extraction directory."""
        path = Path(path)
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)
        logger.debug(f"Removed {path}")
