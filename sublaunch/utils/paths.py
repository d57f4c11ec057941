"""Path helpers for platform-specific spelling of filesystem paths."""

from __future__ import annotations

import sys

WINDOWS_PLATFORM = "win32"


def is_windows(platform: str = sys.platform) -> bool:
    return platform == WINDOWS_PLATFORM


def platform_path_to_preferred_case(path: str, platform: str = sys.platform) -> str:
    """Return ``path`` with the drive letter upper-cased on Windows.

    ``c:\\work`` and ``C:\\work`` name the same directory, but tools compare
    paths textually, so launches always use the upper-case spelling.
    Non-Windows paths and paths without a drive letter are returned as-is.
    """
    if path and is_windows(platform) and len(path) > 1 and path[1] == ":":
        return path[0].upper() + path[1:]
    return path
