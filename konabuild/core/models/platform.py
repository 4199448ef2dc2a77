"""
Host platform — the one OS fact the test policy cares about.
"""

from __future__ import annotations

import platform
from enum import StrEnum


class HostPlatform(StrEnum):
    """Operating system family of the build host."""

    WINDOWS = "windows"
    OTHER = "other"

    @classmethod
    def detect(cls) -> HostPlatform:
        """Classify the running interpreter's OS."""
        return cls.from_system(platform.system())

    @classmethod
    def from_system(cls, system: str) -> HostPlatform:
        """Classify a ``platform.system()`` string (``"Windows"``, ``"Linux"``, ...)."""
        if system.lower().startswith(("windows", "cygwin", "msys")):
            return cls.WINDOWS
        return cls.OTHER
