"""
Host platform detection.

Only used to pick shell invocation flags and process listing commands.
"""

import sys


def is_windows() -> bool:
    """Return True on Windows hosts (including Cygwin builds of Python)."""
    return sys.platform.startswith(("win32", "cygwin"))


def is_linux() -> bool:
    return sys.platform.startswith("linux")


def is_macos() -> bool:
    return sys.platform == "darwin"


def is_solaris() -> bool:
    return sys.platform.startswith(("sunos", "solaris"))


def name() -> str:
    """
    Return the detected platform family.

    Returns:
        str: One of "windows", "linux", "macos", "solaris" or the raw
        sys.platform value for anything else
    """
    if is_windows():
        return "windows"
    if is_linux():
        return "linux"
    if is_macos():
        return "macos"
    if is_solaris():
        return "solaris"
    return sys.platform
