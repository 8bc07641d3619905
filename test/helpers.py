"""
Shared helpers for setup-protoc tests.
"""

import zipfile
from pathlib import Path
from typing import Union


def create_protoc_archive(archive_path: Union[str, Path], version: str = "3.15.0") -> Path:
    """
    Create a zip laid out like a protoc release archive.

    Args:
        archive_path: Where to write the archive
        version: Version written into the readme

    Returns:
        Path to the archive
    """
    archive_path = Path(archive_path)
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive_path, "w") as zf:
        zf.writestr("bin/protoc", "#!/bin/sh\necho libprotoc " + version + "\n")
        zf.writestr("include/google/protobuf/empty.proto", 'syntax = "proto3";\n')
        zf.writestr("readme.txt", f"Protocol Buffers - protoc {version}\n")
    return archive_path


def create_installation(root: Union[str, Path]) -> Path:
    """Create an extracted protoc tree under root."""
    root = Path(root)
    (root / "bin").mkdir(parents=True, exist_ok=True)
    (root / "bin" / "protoc").write_text("#!/bin/sh\n")
    (root / "include").mkdir(exist_ok=True)
    return root
