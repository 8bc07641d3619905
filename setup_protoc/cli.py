#!/usr/bin/env python3
"""
Command line entry point for setup-protoc.

    setup-protoc [install] --version 3.15.0
    setup-protoc releases --include-pre-releases

Inputs not given on the command line are read from the GitHub Actions
INPUT_* variables and then from the optional --config YAML file.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from . import __version__
from .ci import setup_logging
from .config import load_config, parse_bool
from .installer import get_protoc
from .platform_info import Platform
from .releases import list_releases
from .toolcache import ToolCache

logger = logging.getLogger(__name__)

COMMANDS = ("install", "releases")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="setup-protoc",
        description="Install protoc and add it to the PATH of CI jobs",
    )
    parser.add_argument("--tool-version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    install = subparsers.add_parser("install", help="Install protoc and update the PATH")
    install.add_argument("--version", help="Protoc version, e.g. 3.15.0 or v3.15.0")
    install.add_argument("--config", help="YAML configuration file")
    install.add_argument("--include-pre-releases", dest="include_prereleases",
                         action="store_const", const=True, default=None,
                         help="Include pre-release versions")
    install.add_argument("--repo-token", help="GitHub token")

    releases = subparsers.add_parser("releases", help="List available protoc releases")
    releases.add_argument("--include-pre-releases", dest="include_prereleases",
                          action="store_true", help="Include pre-release versions")
    releases.add_argument("--repo-token", default=None, help="GitHub token")
    releases.add_argument("--limit", type=int, default=30, help="Number of releases to fetch")

    return parser


def run_install(args: argparse.Namespace, platform: Platform) -> str:
    """Resolve settings and install protoc."""
    config = load_config(
        platform.os_name,
        os.environ,
        config_path=args.config,
        overrides={
            "version": args.version,
            "include_prereleases": args.include_prereleases,
            "repo_token": args.repo_token,
        },
    )
    setup_logging(config.log_level, config.log_format)
    logger.debug(f"Platform: {platform}")
    logger.debug(f"Tool cache: {config.cache_root}, temp: {config.temp_dir}")

    cache = ToolCache(config.cache_root, config.temp_dir)
    return get_protoc(
        config.version,
        config.include_prereleases,
        config.repo_token,
        platform=platform,
        cache=cache,
    )


def run_releases(args: argparse.Namespace) -> None:
    """Print available release tags, one per line."""
    token = args.repo_token or os.environ.get("INPUT_REPO-TOKEN", "")
    include_prereleases = args.include_prereleases or parse_bool(
        os.environ.get("INPUT_INCLUDE-PRE-RELEASES"), "include-pre-releases"
    )
    for release in list_releases(include_prereleases, token, per_page=args.limit):
        suffix = " (pre-release)" if release.prerelease else ""
        print(f"{release.tag_name}{suffix}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for setup-protoc."""
    if argv is None:
        argv = sys.argv[1:]
    # install is the default command
    if not argv or argv[0] not in COMMANDS + ("-h", "--help", "--tool-version"):
        argv = ["install"] + list(argv)

    args = build_parser().parse_args(argv)

    # Detected once per process
    platform = Platform.detect()

    try:
        if args.command == "releases":
            setup_logging("INFO", "text")
            run_releases(args)
        else:
            run_install(args, platform)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if os.environ.get("GITHUB_ACTIONS") == "true":
            print(f"::error::{e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
