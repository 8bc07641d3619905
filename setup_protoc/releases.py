#!/usr/bin/env python3
"""
List protoc releases published on GitHub.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from .errors import ReleaseLookupError

logger = logging.getLogger(__name__)

RELEASES_API_URL = "https://api.github.com/repos/protocolbuffers/protobuf/releases"


@dataclass
class ProtocRelease:
    """A tagged protoc release."""
    tag_name: str
    prerelease: bool


def list_releases(
    include_prereleases: bool = False,
    repo_token: str = "",
    per_page: int = 30,
    session: Optional[requests.Session] = None,
) -> List[ProtocRelease]:
    """
    Get the published protoc releases.

    Args:
        include_prereleases: Keep releases marked as pre-release
        repo_token: GitHub token, raises the API rate limit when given
        per_page: Number of releases requested from the API
        session: HTTP session to use

    Returns:
        Releases in the order returned by the API, newest first

    Raises:
        ReleaseLookupError: If the API request fails
    """
    headers = {"Accept": "application/vnd.github+json"}
    if repo_token:
        headers["Authorization"] = f"token {repo_token}"

    http = session or requests
    try:
        response = http.get(
            RELEASES_API_URL,
            headers=headers,
            params={"per_page": per_page},
            timeout=30,
        )
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as e:
        raise ReleaseLookupError(f"Failed to fetch protoc releases: {e}") from e
    except ValueError as e:
        raise ReleaseLookupError(f"Invalid release data: {e}") from e

    releases = []
    for item in data:
        if item.get("draft"):
            continue
        prerelease = bool(item.get("prerelease"))
        if prerelease and not include_prereleases:
            continue
        releases.append(ProtocRelease(tag_name=item["tag_name"], prerelease=prerelease))

    logger.debug(f"Found {len(releases)} protoc releases")
    return releases
