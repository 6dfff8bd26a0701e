"""
Shared test fixtures for tasksh tests.

This module contains pytest fixtures that are shared across all test modules,
including mocks for the OpenAI client, canned replies, and environment
helpers.
"""

import os
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import httpx
import pytest
from faker import Faker
from openai import RateLimitError

from tasksh.config.environment import GeneratorConfig
from tasksh.generator.constants import (
    API_KEY_ENV,
    DISABLE_MACHINE_CONTEXT_ENV,
    FAKE_RESPONSE_ENV,
)

fake = Faker()

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


# ============================================================================
# API Key Fixtures
# ============================================================================


@pytest.fixture
def valid_api_key() -> str:
    """Return an API key for testing."""
    return "sk-" + "a" * 48


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove every environment variable the pipeline reads."""
    for name in (API_KEY_ENV, FAKE_RESPONSE_ENV, DISABLE_MACHINE_CONTEXT_ENV):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def mock_env_api_key(valid_api_key):
    """Mock environment variable with API key."""
    with patch.dict(os.environ, {API_KEY_ENV: valid_api_key}):
        yield valid_api_key


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def live_config(valid_api_key) -> GeneratorConfig:
    """Config for the network path with deterministic host context."""
    return GeneratorConfig(
        api_key=valid_api_key,
        disable_machine_context=True,
        user_shell="/bin/bash",
    )


def fixture_config(reply: str) -> GeneratorConfig:
    """Config that replaces the remote call with a literal reply."""
    return GeneratorConfig(fake_response=reply, disable_machine_context=True)


# ============================================================================
# OpenAI Fixtures
# ============================================================================


def make_completion(
    content: Optional[str], tool_arguments: Optional[List[str]] = None
) -> Mock:
    """Build a chat completion response with a single choice."""
    message = Mock()
    message.content = content
    if tool_arguments is None:
        message.tool_calls = None
    else:
        calls = []
        for arguments in tool_arguments:
            call = Mock()
            call.function.arguments = arguments
            calls.append(call)
        message.tool_calls = calls

    choice = Mock()
    choice.message = message

    response = Mock()
    response.choices = [choice]
    return response


def make_rate_limit_error() -> RateLimitError:
    request = httpx.Request("POST", OPENAI_URL)
    return RateLimitError(
        "Rate limit exceeded",
        response=httpx.Response(429, request=request),
        body=None,
    )


def make_network_error() -> httpx.ConnectError:
    return httpx.ConnectError("Connection failed")


@pytest.fixture
def mock_openai():
    """
    Patch AsyncOpenAI in the client module.

    Yields the mocked chat.completions.create coroutine; configure its
    return_value or side_effect per test.
    """
    with patch("tasksh.generator.openai_client.AsyncOpenAI") as mock_cls:
        client = MagicMock()
        client.chat.completions.create = AsyncMock()
        mock_cls.return_value.__aenter__.return_value = client
        mock_cls.return_value.__aexit__.return_value = False
        yield client.chat.completions.create


@pytest.fixture
def no_sleep():
    """Awaitable stand-in for asyncio.sleep that records delays."""
    return AsyncMock(return_value=None)


# ============================================================================
# Test Data Fixtures
# ============================================================================


@pytest.fixture
def sample_description() -> str:
    """A multi-word description that passes the ambiguity check."""
    return f"list files in {fake.word()} directory"


@pytest.fixture
def sample_replies() -> dict:
    """Representative model replies."""
    return {
        "labelled": "Command: ls -la\nExplanation: Lists files",
        "fenced": "Here you go:\n```bash\ndu -sh *\n```\nShows disk usage per entry.",
        "options": (
            "Commands:\n- ls -la\n- find . -maxdepth 1\n\n"
            "Explanation: Either lists the directory"
        ),
        "dangerous": "Command: rm -rf /\nExplanation: wipe",
    }


# ============================================================================
# Factory Fixtures
# ============================================================================


@pytest.fixture
def completion():
    """Factory for chat completion responses."""
    return make_completion


@pytest.fixture
def rate_limit_error() -> RateLimitError:
    return make_rate_limit_error()


@pytest.fixture
def network_error() -> httpx.ConnectError:
    return make_network_error()


@pytest.fixture
def reply_config():
    """Factory for fixture-override configs."""
    return fixture_config
