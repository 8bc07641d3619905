#!/usr/bin/env python3
"""
Platform detection for protoc release selection.

The descriptor is detected once at process start and passed explicitly to
the functions that compute release file names and cache keys.
"""

import platform as _platform
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Platform:
    """Operating system family and CPU architecture of the host."""
    os_name: str  # windows, darwin or linux
    arch: str  # x64, x86 or the raw machine name

    @property
    def is_64bit(self) -> bool:
        return self.arch == "x64"

    @property
    def is_windows(self) -> bool:
        return self.os_name == "windows"

    @classmethod
    def detect(cls, system: Optional[str] = None, machine: Optional[str] = None) -> "Platform":
        """
        Detects the current platform and architecture.

        Args:
            system: Override for platform.system(), mainly for tests
            machine: Override for platform.machine(), mainly for tests

        Returns:
            Platform where os_name is "windows", "darwin" or "linux" and
            arch is "x64", "x86" or the lower-cased machine name
        """
        if system is None:
            system = _platform.system()
        if machine is None:
            machine = _platform.machine()

        # Detect OS, anything unknown gets the Linux naming
        system = system.lower()
        if system in ("windows", "win32"):
            os_name = "windows"
        elif system == "darwin":
            os_name = "darwin"
        else:
            os_name = "linux"

        # Detect architecture
        machine = machine.lower()
        if machine in ("x86_64", "amd64", "x64"):
            arch = "x64"
        elif machine in ("i386", "i686", "x86"):
            arch = "x86"
        else:
            arch = machine

        return cls(os_name=os_name, arch=arch)

    def __str__(self) -> str:
        return f"{self.os_name}-{self.arch}"
