"""
Platform detection utilities for tasksh.

This module provides functions to detect the operating system, CPU
architecture and active shell so that generated commands can be grounded in
the environment they will run in.
"""

import os
import platform
import sys
from typing import Dict, Optional


def get_platform_info() -> Dict[str, str]:
    """
    Get basic information about the current platform.

    Returns:
        Dict[str, str]: Dictionary containing platform information.
    """
    info = {
        "os_name": platform.system(),
        "architecture": platform.machine(),
        "python_version": platform.python_version(),
    }

    shell_name = detect_shell_from_environment()
    if shell_name:
        info["shell_name"] = shell_name

    return info


def is_windows() -> bool:
    """
    Check if the current platform is Windows.

    Returns:
        bool: True if Windows, False otherwise.
    """
    return platform.system().lower() == "windows"


def is_macos() -> bool:
    """
    Check if the current platform is macOS.

    Returns:
        bool: True if macOS, False otherwise.
    """
    return platform.system().lower() == "darwin"


def detect_shell_from_environment() -> Optional[str]:
    """
    Detect the user's login shell from the SHELL environment variable.

    Returns:
        Optional[str]: Shell name such as "bash" or "zsh", or None when the
        variable is unset.
    """
    shell_path = os.environ.get("SHELL", "").strip()
    if not shell_path:
        return None

    # /usr/local/bin/zsh -> zsh
    return os.path.basename(shell_path.rstrip("/")) or None


def supports_ansi_colors() -> bool:  # pragma: no cover - terminal capability check
    """
    Check if the terminal supports ANSI colors.

    Returns:
        bool: True if ANSI colors are supported, False otherwise.
    """
    if is_windows():
        if os.environ.get("WT_SESSION") or os.environ.get("ANSICON"):
            return True

        try:
            if hasattr(sys, "getwindowsversion"):
                if sys.getwindowsversion().major >= 10:
                    return True
        except AttributeError:
            pass

    term_env = os.environ.get("TERM")
    if term_env and term_env != "dumb":
        return True

    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
