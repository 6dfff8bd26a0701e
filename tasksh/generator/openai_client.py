"""
OpenAI API client for tasksh.

This module drives chat completion requests through a bounded retry loop
with per-attempt timeouts and linear backoff, and returns the reply text
for parsing.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import httpx
from openai import APIError, AsyncOpenAI, RateLimitError

from tasksh.config.environment import GeneratorConfig
from tasksh.errors import BackendError, ResponseParseError
from tasksh.generator.constants import DEFAULT_BACKOFF, RATE_LIMIT_BACKOFF
from tasksh.generator.prompt_builder import PromptBuilder
from tasksh.models.command_models import GenerationRequest
from tasksh.utils.logging import get_logger
from tasksh.utils.security import secure_string

logger = get_logger("generator.openai_client")

# Failures worth another attempt; anything else ends the loop
RETRYABLE_ERRORS = (APIError, httpx.HTTPError)


class RequestTimeoutError(Exception):
    """Synthetic cause recorded when an attempt exceeds its timeout."""

    def __init__(self, timeout: float):
        super().__init__("Request timed out")
        self.timeout = timeout


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


@dataclass
class AttemptOutcome:
    kind: OutcomeKind
    content: Optional[str] = None
    error: Optional[BaseException] = None


def extract_reply_content(response: Any) -> str:
    """
    Pull the reply text out of a chat completion response.

    Falls back to the tool-call argument payloads when the message content
    is empty, since some models answer only through structured calls.

    Args:
        response (Any): A chat completion response object.

    Returns:
        str: The effective reply text.

    Raises:
        ResponseParseError: If the response has no choices.
    """
    choices = getattr(response, "choices", None) or []
    if not choices:
        raise ResponseParseError("OpenAI response did not contain any choices")

    message = choices[0].message
    content = message.content or ""

    tool_calls = getattr(message, "tool_calls", None)
    if not content.strip() and tool_calls:
        fallback = "\n".join(
            call.function.arguments or "" for call in tool_calls
        )
        if fallback.strip():
            content = fallback

    return content


def compute_backoff_delay(error: BaseException, attempt: int) -> float:
    """
    Compute how long to wait before the next attempt.

    Args:
        error (BaseException): The failure of the current attempt.
        attempt (int): Zero-based attempt index.

    Returns:
        float: Delay in seconds.
    """
    is_rate_limited = isinstance(error, RateLimitError) or (
        "rate limit" in str(error).lower()
    )
    base_delay = RATE_LIMIT_BACKOFF if is_rate_limited else DEFAULT_BACKOFF
    return base_delay * (attempt + 1)


class OpenAIClient:
    """
    Async client for command generation against the OpenAI API.

    Each call to generate() runs up to max_retries sequential attempts.
    Transport and backend failures (including timeouts) are retried;
    malformed responses are not.
    """

    def __init__(
        self,
        api_key: str,
        config: Optional[GeneratorConfig] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key (str): OpenAI API key.
            config (Optional[GeneratorConfig]): Timeout, retry bound and
                temperature. Defaults to the built-in values.
            prompt_builder (Optional[PromptBuilder]): Builds each attempt's
                messages.
            sleep (Optional[Callable]): Awaitable used for backoff waits.
        """
        if not api_key or not api_key.strip():
            logger.error("No API key provided")
            raise ValueError("OpenAI API key is required")

        self.api_key = api_key.strip()
        self.config = config or GeneratorConfig()
        self.prompt_builder = prompt_builder or PromptBuilder(self.config)
        self._sleep = sleep or asyncio.sleep

        logger.debug(
            f"OpenAI client initialized with key {secure_string(self.api_key)}"
        )

    async def _attempt(
        self, client: AsyncOpenAI, request: GenerationRequest, attempt: int
    ) -> AttemptOutcome:
        # Rebuilt on every attempt so no state leaks between tries
        payload = self.prompt_builder.build_chat_request(request)
        logger.debug(
            f"Dispatching chat completion (attempt {attempt + 1}/"
            f"{self.config.max_retries}, model {payload['model']})"
        )

        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(**payload),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError:
            return AttemptOutcome(
                OutcomeKind.RETRYABLE, error=RequestTimeoutError(self.config.timeout)
            )
        except RETRYABLE_ERRORS as e:
            return AttemptOutcome(OutcomeKind.RETRYABLE, error=e)

        try:
            content = extract_reply_content(response)
        except ResponseParseError as e:
            return AttemptOutcome(OutcomeKind.TERMINAL, error=e)

        return AttemptOutcome(OutcomeKind.SUCCESS, content=content)

    async def generate(self, request: GenerationRequest) -> str:
        """
        Request a completion for a generation request.

        Args:
            request (GenerationRequest): What to generate.

        Returns:
            str: The raw reply text of the first successful attempt.

        Raises:
            BackendError: If every attempt failed at the transport level.
            ResponseParseError: If a response arrived without any choices.
        """
        last_error: Optional[BaseException] = None
        max_retries = self.config.max_retries

        async with AsyncOpenAI(api_key=self.api_key, max_retries=0) as client:
            for attempt in range(max_retries):
                outcome = await self._attempt(client, request, attempt)

                if outcome.kind is OutcomeKind.SUCCESS:
                    logger.debug(f"Raw completion content: {outcome.content!r}")
                    return outcome.content or ""

                if outcome.kind is OutcomeKind.TERMINAL:
                    logger.error(f"Unusable response from OpenAI: {outcome.error}")
                    raise outcome.error

                last_error = outcome.error
                if attempt + 1 == max_retries:
                    break

                delay = compute_backoff_delay(last_error, attempt)
                logger.warning(
                    f"OpenAI request failed (attempt {attempt + 1}/{max_retries}): "
                    f"{last_error}; retrying in {delay:.1f}s"
                )
                await self._sleep(delay)

        logger.error(f"Giving up after {max_retries} attempts: {last_error}")
        raise BackendError(
            "Failed to generate command after multiple attempts",
            attempts=max_retries,
            last_error=last_error,
        ) from last_error
