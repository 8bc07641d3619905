#!/usr/bin/env python3
"""
Install protoc from the upstream GitHub releases.

Resolves a requested version from the tool cache, downloading and caching
the release archive on a miss, and puts its bin directory on the PATH used
by later CI steps. When Go is installed, GOPATH/bin is added as well so
protoc plugins installed with `go install` can be found.
"""

import logging
import os
from typing import MutableMapping, Optional

from . import ci
from .errors import DownloadError
from .platform_info import Platform
from .toolcache import ToolCache

logger = logging.getLogger(__name__)

TOOL_NAME = "protoc"
RELEASE_URL = "https://github.com/protocolbuffers/protobuf/releases/download/%s/%s"


def normalize_version(version: str) -> str:
    """Return the release tag for a version, which always starts with "v"."""
    if not version.startswith("v"):
        version = "v" + version
    return version


def get_file_name(version: str, platform: Platform) -> str:
    """
    Compose the release archive name for a version and platform.

    Args:
        version: Version, with or without the leading "v"
        platform: Host platform

    Returns:
        Archive name, e.g. "protoc-3.15.0-linux-x86_64.zip"
    """
    # the file name uses the bare version
    if version.startswith("v"):
        version = version[1:]

    # Windows packages use a different naming pattern
    if platform.is_windows:
        arch = "64" if platform.is_64bit else "32"
        return "protoc-%s-win%s.zip" % (version, arch)

    arch = "x86_64" if platform.is_64bit else "x86_32"

    if platform.os_name == "darwin":
        return "protoc-%s-osx-%s.zip" % (version, arch)

    return "protoc-%s-linux-%s.zip" % (version, arch)


def get_download_url(version: str, file_name: str) -> str:
    """Build the release asset URL for a tag and archive name."""
    return RELEASE_URL % (version, file_name)


def download_release(version: str, platform: Platform, cache: ToolCache) -> str:
    """
    Download, extract and cache a protoc release.

    Args:
        version: Normalized version tag
        platform: Host platform
        cache: Tool cache to install into

    Returns:
        Path to the cached installation

    Raises:
        DownloadError: If the archive cannot be downloaded
    """
    file_name = get_file_name(version, platform)
    download_url = get_download_url(version, file_name)
    print(f"Downloading archive: {download_url}", flush=True)

    try:
        download_path = cache.download_tool(download_url)
    except Exception as e:
        logger.debug(str(e))
        raise DownloadError(f"Failed to download version {version}: {e}") from e

    extract_path = None
    try:
        extract_path = cache.extract_zip(download_path)
        return cache.cache_dir(extract_path, TOOL_NAME, version, platform.arch)
    finally:
        # the cache holds its own copy
        cache.remove(download_path)
        if extract_path:
            cache.remove(extract_path)


def add_go_path(environ: Optional[MutableMapping[str, str]] = None) -> None:
    """
    Add GOPATH/bin to the PATH when Go is installed.

    setup-go does not put GOPATH/bin on the PATH, so Go based protoc plugins
    would not be found otherwise. Failures of `go env` are not caught.
    """
    if environ is None:
        environ = os.environ

    go_bin = ci.which("go", False, path=environ.get("PATH"))
    if not go_bin:
        return

    go_path = ci.run_command([go_bin, "env", "GOPATH"])
    logger.debug(f"GOPATH: {go_path}")

    ci.add_path(os.path.join(go_path, "bin"), environ)


def get_protoc(
    version: str,
    include_prereleases: bool,
    repo_token: str,
    platform: Platform,
    cache: ToolCache,
    environ: Optional[MutableMapping[str, str]] = None,
) -> str:
    """
    Make a protoc version available on the PATH.

    Args:
        version: Requested version, with or without the leading "v"
        include_prereleases: Accepted for the action interface, not used
        repo_token: Accepted for the action interface, not used
        platform: Host platform
        cache: Tool cache to look up and install into
        environ: Environment whose PATH is extended (defaults to os.environ)

    Returns:
        Path to the protoc installation root
    """
    version = normalize_version(version)
    print(f"Getting protoc version: {version}", flush=True)
    logger.debug(f"include_prereleases={include_prereleases} repo_token={'set' if repo_token else 'unset'}")

    # look if the binary is cached
    tool_path = cache.find(TOOL_NAME, version, platform.arch)

    # if not: download, extract and cache
    if not tool_path:
        tool_path = download_release(version, platform, cache)
        print(f"Protoc cached under {tool_path}", flush=True)

    ci.add_path(os.path.join(tool_path, "bin"), environ)

    add_go_path(environ)

    return tool_path
