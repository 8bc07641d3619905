#!/usr/bin/env python3
"""
Tests for the local tool cache.
"""

import os
import zipfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from helpers import create_installation
from setup_protoc.toolcache import ToolCache


def _session_returning(response):
    session = MagicMock()
    session.headers = {}
    session.get.return_value.__enter__.return_value = response
    return session


def test_find_on_empty_cache_is_a_miss(tool_cache):
    assert tool_cache.find("protoc", "v3.15.0", "x64") == ""


def test_find_requires_tool_and_version(tool_cache):
    with pytest.raises(ValueError):
        tool_cache.find("", "v3.15.0", "x64")
    with pytest.raises(ValueError):
        tool_cache.find("protoc", "", "x64")


def test_cache_dir_then_find(tool_cache, work_dir):
    source = create_installation(work_dir / "extracted")

    cached = tool_cache.cache_dir(source, "protoc", "v3.15.0", "x64")

    assert cached == str(work_dir / "cache" / "protoc" / "v3.15.0" / "x64")
    assert (Path(cached) / "bin" / "protoc").is_file()
    assert tool_cache.find("protoc", "v3.15.0", "x64") == cached
    # other versions and architectures stay misses
    assert tool_cache.find("protoc", "v3.14.0", "x64") == ""
    assert tool_cache.find("protoc", "v3.15.0", "x86") == ""


def test_directory_without_marker_is_a_miss(tool_cache, work_dir):
    create_installation(work_dir / "cache" / "protoc" / "v3.15.0" / "x64")

    assert tool_cache.find("protoc", "v3.15.0", "x64") == ""


def test_cache_dir_replaces_existing_entry(tool_cache, work_dir):
    first = create_installation(work_dir / "first")
    (first / "stale.txt").write_text("old")
    tool_cache.cache_dir(first, "protoc", "v3.15.0", "x64")

    second = create_installation(work_dir / "second")
    cached = tool_cache.cache_dir(second, "protoc", "v3.15.0", "x64")

    assert not (Path(cached) / "stale.txt").exists()
    assert (Path(cached) / "bin" / "protoc").exists()


def test_cache_dir_rejects_missing_source(tool_cache, work_dir):
    with pytest.raises(ValueError):
        tool_cache.cache_dir(work_dir / "missing", "protoc", "v3.15.0", "x64")


def test_extract_zip(tool_cache, protoc_archive, work_dir):
    extracted = Path(tool_cache.extract_zip(protoc_archive))

    assert extracted.parent == work_dir / "temp"
    assert (extracted / "bin" / "protoc").is_file()
    assert (extracted / "include" / "google" / "protobuf" / "empty.proto").is_file()
    if os.name != "nt":
        assert os.access(extracted / "bin" / "protoc", os.X_OK)


def test_extract_invalid_archive(tool_cache, work_dir):
    bogus = work_dir / "bogus.zip"
    bogus.write_text("<html>Not Found</html>")

    with pytest.raises(zipfile.BadZipFile):
        tool_cache.extract_zip(bogus)


def test_download_tool_writes_body(work_dir):
    response = MagicMock()
    response.iter_content.return_value = [b"PK", b"", b"data"]
    session = _session_returning(response)
    cache = ToolCache(work_dir / "cache", work_dir / "temp", session=session)

    path = cache.download_tool("https://example.com/protoc.zip")

    assert Path(path).parent == work_dir / "temp"
    assert Path(path).read_bytes() == b"PKdata"
    session.get.assert_called_once()
    assert session.get.call_args[0][0] == "https://example.com/protoc.zip"
    assert session.get.call_args[1]["stream"] is True
    assert session.headers["User-Agent"] == "setup-protoc"


def test_download_tool_http_error(work_dir):
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("404 Client Error: Not Found")
    session = _session_returning(response)
    cache = ToolCache(work_dir / "cache", work_dir / "temp", session=session)

    with pytest.raises(requests.HTTPError):
        cache.download_tool("https://example.com/missing.zip")

    assert list((work_dir / "temp").iterdir()) == []


def test_download_tool_removes_partial_file(work_dir):
    response = MagicMock()

    def broken_body(chunk_size):
        yield b"partial"
        raise requests.ConnectionError("connection reset")

    response.iter_content.side_effect = broken_body
    session = _session_returning(response)
    cache = ToolCache(work_dir / "cache", work_dir / "temp", session=session)

    with pytest.raises(requests.ConnectionError):
        cache.download_tool("https://example.com/protoc.zip")

    assert list((work_dir / "temp").iterdir()) == []


def test_remove_file_and_directory(tool_cache, protoc_archive):
    extracted = Path(tool_cache.extract_zip(protoc_archive))

    tool_cache.remove(extracted)
    tool_cache.remove(protoc_archive)
    # already gone
    tool_cache.remove(protoc_archive)

    assert not extracted.exists()
    assert not protoc_archive.exists()
