"""
Command generation entry point for tasksh.

generate_command() validates the description, obtains a reply (from the
fixture override or from OpenAI), parses it and runs the safety filter
before anything is returned to the caller.
"""

import asyncio
from typing import Optional, Union

from tasksh.config import api_manager
from tasksh.config.environment import GeneratorConfig
from tasksh.errors import ConfigurationError
from tasksh.generator.constants import API_KEY_ENV, GUIDANCE_COMMAND
from tasksh.generator.openai_client import OpenAIClient
from tasksh.generator.prompt_builder import PromptBuilder
from tasksh.generator.response_parser import parse_completion_content
from tasksh.models.command_models import (
    CommandConfidence,
    GeneratedCommand,
    GenerationRequest,
    Shell,
)
from tasksh.utils.logging import get_logger
from tasksh.utils.security import enforce_safety

logger = get_logger("generator.engine")


def guidance_result(explanation: str) -> GeneratedCommand:
    return GeneratedCommand(
        command=GUIDANCE_COMMAND,
        explanation=explanation,
        raw_response=None,
        confidence=CommandConfidence.CERTAIN,
        alternatives=[],
    )


def resolve_shell(shell: Union[Shell, str]) -> Shell:
    try:
        return Shell(shell.lower() if isinstance(shell, str) else shell)
    except ValueError as e:
        supported = ", ".join(s.value for s in Shell)
        raise ConfigurationError(
            f"Unsupported shell {shell!r}; expected one of: {supported}"
        ) from e


def result_from_reply(raw: str) -> GeneratedCommand:
    """
    Parse a reply and run it through the safety filter.

    Args:
        raw (str): Reply text.

    Returns:
        GeneratedCommand: The checked result, with raw_response set.

    Raises:
        ResponseParseError: If no command can be extracted.
        SafetyBlockedError: If the command matches a dangerous pattern.
    """
    draft = parse_completion_content(raw)
    # Only the primary command is screened; alternatives are shown as-is
    enforce_safety(draft.command)
    logger.debug(f"Generated command candidate: {draft.command!r}")
    return GeneratedCommand.from_draft(draft, raw_response=raw)


async def generate_command(
    description: str,
    shell: Union[Shell, str] = Shell.BASH,
    system_prompt: Optional[str] = None,
    model: Optional[str] = None,
    *,
    config: Optional[GeneratorConfig] = None,
) -> GeneratedCommand:
    """
    Generate a shell command for a natural-language description.

    Empty or one-word descriptions produce a guidance result instead of a
    request. When the config carries a fixture reply, it is used in place of
    the remote call.

    Args:
        description (str): What the user wants to do.
        shell (Union[Shell, str]): Target shell, "bash" or "zsh".
        system_prompt (Optional[str]): Replaces the default instructions.
        model (Optional[str]): Chat model id to use instead of the default.
        config (Optional[GeneratorConfig]): Environment-level settings.
            Read from the process environment when omitted.

    Returns:
        GeneratedCommand: The generated command and its metadata.

    Raises:
        ConfigurationError: If the shell is unsupported or no API key is set.
        BackendError: If OpenAI kept failing.
        ResponseParseError: If the reply held no command.
        SafetyBlockedError: If the command was judged dangerous.
    """
    logger.debug(f"Starting command generation for {description!r} ({shell})")

    trimmed = (description or "").strip()
    if not trimmed:
        logger.warning("Received empty description")
        return guidance_result("Description was empty or ambiguous.")

    if len(trimmed.split()) < 2:
        logger.warning(f"Description appears ambiguous: {trimmed!r}")
        return guidance_result("Description appears too short or ambiguous.")

    shell = resolve_shell(shell)
    if config is None:
        config = GeneratorConfig.from_env()

    if config.fake_response is not None:
        logger.debug("Using fake response for testing mode")
        return result_from_reply(config.fake_response)

    if not api_manager.is_api_key_valid(config.api_key):
        logger.error("No OpenAI API key configured")
        raise ConfigurationError(
            f"{API_KEY_ENV} missing. Set it as an environment variable."
        )

    request = GenerationRequest(
        description=description,
        shell=shell,
        system_prompt=system_prompt,
        model=model,
    )
    client = OpenAIClient(
        api_key=config.api_key, config=config, prompt_builder=PromptBuilder(config)
    )
    raw = await client.generate(request)
    return result_from_reply(raw)


def generate_command_sync(
    description: str,
    shell: Union[Shell, str] = Shell.BASH,
    system_prompt: Optional[str] = None,
    model: Optional[str] = None,
    *,
    config: Optional[GeneratorConfig] = None,
) -> GeneratedCommand:
    """Blocking wrapper around generate_command() for synchronous callers."""
    return asyncio.run(
        generate_command(description, shell, system_prompt, model, config=config)
    )
