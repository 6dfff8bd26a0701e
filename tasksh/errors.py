"""
Exception types for the tasksh generation pipeline.

Every failure raised by the pipeline derives from GenerationError, which is
itself a ValueError so callers that only care about "generation did not
produce a command" can catch a single type.
"""

from typing import Optional


class GenerationError(ValueError):
    """Base exception for command generation failures."""


class ConfigurationError(GenerationError):
    """Raised when the pipeline is missing required configuration."""


class BackendError(GenerationError):
    """
    Raised when the remote backend keeps failing.

    Attributes:
        attempts (int): Number of attempts made before giving up.
        last_error (Optional[BaseException]): The final underlying cause.
    """

    def __init__(
        self,
        message: str,
        attempts: int = 0,
        last_error: Optional[BaseException] = None,
    ):
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class ResponseParseError(GenerationError):
    """Raised when a reply was received but holds no usable command."""


class SafetyBlockedError(GenerationError):
    """
    Raised when a generated command matches a dangerous pattern.

    Attributes:
        command (str): The command that was blocked.
        reason (str): Description of the rule that matched.
    """

    def __init__(self, message: str, command: str = "", reason: str = ""):
        super().__init__(message)
        self.command = command
        self.reason = reason
