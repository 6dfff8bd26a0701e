"""
Security utilities for tasksh.

This module provides the safety filter that every generated command passes
through before it is handed back to the caller, plus helpers for keeping
secrets out of logs.
"""

import re
from typing import List, Optional, Pattern, Tuple

from tasksh.errors import SafetyBlockedError
from tasksh.utils.logging import get_logger

logger = get_logger("utils.security")

BLOCKED_MESSAGE = (
    "Generated command was blocked by safety rules. Please refine your description."
)


class CommandSafetyFilter:
    """
    Pattern-based filter for dangerous shell commands.

    Patterns are checked in order and the first match wins. A match is
    terminal: the command is never returned to the caller.
    """

    BLOCK_PATTERNS = [
        (r"\brm\s+-(?:rf|fr)", "Recursive forced deletion (rm -rf)"),
        (r"\bsudo\b", "Privileged command execution (sudo)"),
        (r"\bdd\s+.*of=", "Raw disk write with dd"),
        (r"\bcurl\s+[^|]+\|\s*sh", "Piping a download into a shell"),
        (r"\bchmod\s+777", "Overly permissive file permissions (chmod 777)"),
        (r"\bmkfs\.\w*", "Filesystem creation command (mkfs)"),
        (r"\bscp\s+-r", "Recursive remote copy (scp -r)"),
        (r"shutdown", "System shutdown"),
        (r"reboot", "System reboot"),
        (r"poweroff", "System power off"),
    ]

    def __init__(self):
        """Initialize the filter with compiled patterns."""
        self.block_patterns: List[Tuple[Pattern[str], str]] = [
            (re.compile(pattern, re.IGNORECASE), description)
            for pattern, description in self.BLOCK_PATTERNS
        ]

    def check(self, command: str) -> Optional[str]:
        """
        Find the first rule a command violates.

        Args:
            command (str): The command to check.

        Returns:
            Optional[str]: Description of the matching rule, or None if the
            command is allowed.
        """
        for pattern, description in self.block_patterns:
            if pattern.search(command):
                return description
        return None

    def enforce(self, command: str) -> None:
        """
        Block a command that matches any dangerous pattern.

        Args:
            command (str): The command to check.

        Raises:
            SafetyBlockedError: If the command matches a blocked pattern.
        """
        reason = self.check(command)
        if reason is not None:
            logger.warning(f"Blocked unsafe command {command!r}: {reason}")
            raise SafetyBlockedError(BLOCKED_MESSAGE, command=command, reason=reason)


def secure_string(value: Optional[str]) -> str:
    """
    Securely mask a sensitive string for display or logging.

    Args:
        value (Optional[str]): The sensitive string to mask.

    Returns:
        str: Masked string.
    """
    if not value:
        return ""

    if len(value) <= 4:
        return "*" * len(value)
    return value[0] + "*" * (len(value) - 2) + value[-1]


# Global instance of the command safety filter
safety_filter = CommandSafetyFilter()


def enforce_safety(command: str) -> None:
    """Run the global safety filter on a command."""
    safety_filter.enforce(command)
