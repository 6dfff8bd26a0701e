"""
Runtime configuration for the generation pipeline.

All environment lookups the pipeline depends on happen in
GeneratorConfig.from_env(); the pipeline itself only reads the config
object it is handed.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from tasksh.config import api_manager
from tasksh.generator.constants import (
    DISABLE_MACHINE_CONTEXT_ENV,
    FAKE_RESPONSE_ENV,
    MAX_RETRIES,
    REQUEST_TIMEOUT,
    TEMPERATURE,
)


@dataclass(frozen=True)
class GeneratorConfig:
    api_key: Optional[str] = None
    # Literal reply text that replaces the remote call entirely
    fake_response: Optional[str] = None
    disable_machine_context: bool = False
    user_shell: Optional[str] = None
    timeout: float = REQUEST_TIMEOUT
    max_retries: int = MAX_RETRIES
    temperature: float = TEMPERATURE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GeneratorConfig":
        """
        Build a config from process environment variables.

        Args:
            environ (Optional[Mapping[str, str]]): Mapping to read instead of
                os.environ.

        Returns:
            GeneratorConfig: Snapshot of the environment-level settings.
        """
        if environ is None:
            environ = os.environ
            api_key = api_manager.get_api_key()
        else:
            api_key = environ.get(api_manager.API_KEY_ENV)

        return cls(
            api_key=api_key,
            fake_response=environ.get(FAKE_RESPONSE_ENV),
            # Presence alone disables it, whatever the value
            disable_machine_context=DISABLE_MACHINE_CONTEXT_ENV in environ,
            user_shell=environ.get("SHELL") or None,
        )
