"""Platform and OS detection utilities."""

import os
import platform
from typing import Literal

PlatformOS = Literal["windows", "linux", "macos"]


def get_os() -> PlatformOS:
    """Get the current operating system.

    Returns:
        One of: "windows", "linux", "macos"
    """
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    elif system == "windows":
        return "windows"
    else:
        return "linux"


def get_path_separator() -> str:
    """Get the platform's primary path separator ("/" or "\\")."""
    return os.sep


def get_platform_info() -> dict[str, str]:
    """Get platform details for debug logging.

    Returns:
        Dictionary with platform details
    """
    return {
        "os": get_os(),
        "separator": get_path_separator(),
        "python_version": platform.python_version(),
        "platform": platform.platform(),
    }
