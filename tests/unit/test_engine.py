"""
Unit tests for tasksh.generator.engine module.

Tests the generation pipeline end to end with the remote call mocked or
replaced by a fixture reply.
"""

import pytest

from tasksh.config.environment import GeneratorConfig
from tasksh.errors import (
    BackendError,
    ConfigurationError,
    ResponseParseError,
    SafetyBlockedError,
)
from tasksh.generator.constants import FAKE_RESPONSE_ENV, GUIDANCE_COMMAND
from tasksh.generator.engine import (
    generate_command,
    generate_command_sync,
    resolve_shell,
    result_from_reply,
)
from tasksh.models.command_models import CommandConfidence, Shell


class TestAmbiguousDescriptions:
    """Descriptions that never reach the backend."""

    @pytest.mark.parametrize("description", ["", "   ", "\n\t", None])
    async def test_empty_description(self, description, mock_openai):
        result = await generate_command(description, config=GeneratorConfig())

        assert result.command == GUIDANCE_COMMAND
        assert result.explanation == "Description was empty or ambiguous."
        assert result.raw_response is None
        assert result.confidence == CommandConfidence.CERTAIN
        assert result.alternatives == []
        mock_openai.assert_not_awaited()

    async def test_single_word_description(self, mock_openai):
        result = await generate_command("  ls  ", config=GeneratorConfig())

        assert result.command == GUIDANCE_COMMAND
        assert result.explanation == "Description appears too short or ambiguous."
        assert result.is_guidance
        mock_openai.assert_not_awaited()

    async def test_ambiguity_checked_before_shell(self):
        result = await generate_command("ls", "fish", config=GeneratorConfig())

        assert result.command == GUIDANCE_COMMAND

    async def test_guidance_needs_no_api_key(self, clean_environment):
        result = await generate_command("help")

        assert result.command == GUIDANCE_COMMAND


class TestFixtureReplies:
    """The fixture override replaces the remote call."""

    async def test_labelled_reply(self, reply_config, sample_replies, mock_openai):
        reply = sample_replies["labelled"]
        result = await generate_command(
            "list all files", config=reply_config(reply)
        )

        assert result.command == "ls -la"
        assert result.explanation == "Lists files"
        assert result.raw_response == reply
        mock_openai.assert_not_awaited()

    async def test_fixture_ignores_missing_key(self, reply_config, sample_replies):
        config = reply_config(sample_replies["labelled"])
        assert config.api_key is None

        result = await generate_command("list all files", config=config)

        assert result.command == "ls -la"

    async def test_fixture_is_safety_checked(self, reply_config, sample_replies):
        with pytest.raises(SafetyBlockedError) as exc_info:
            await generate_command(
                "wipe the disk", config=reply_config(sample_replies["dangerous"])
            )

        assert exc_info.value.command == "rm -rf /"

    async def test_alternatives_are_not_screened(self, reply_config):
        reply = "Command: ls\nCommands:\n- sudo rm -rf /tmp/cache\n"

        result = await generate_command(
            "clear the cache", config=reply_config(reply)
        )

        assert result.command == "ls"
        assert result.alternatives == ["sudo rm -rf /tmp/cache"]

    async def test_unusable_fixture(self, reply_config):
        with pytest.raises(ResponseParseError):
            await generate_command("list all files", config=reply_config("   "))

    async def test_fixture_from_environment(
        self, clean_environment, monkeypatch, sample_replies
    ):
        monkeypatch.setenv(FAKE_RESPONSE_ENV, sample_replies["options"])

        result = await generate_command("show directory contents")

        assert result.alternatives == ["ls -la", "find . -maxdepth 1"]
        assert result.confidence == CommandConfidence.NEEDS_CONFIRMATION


class TestConfigurationErrors:
    """Failures before any request is made."""

    async def test_missing_api_key(self, mock_openai):
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY missing"):
            await generate_command("list all files", config=GeneratorConfig())

        mock_openai.assert_not_awaited()

    async def test_blank_api_key(self):
        with pytest.raises(ConfigurationError):
            await generate_command(
                "list all files", config=GeneratorConfig(api_key="   ")
            )

    async def test_missing_key_from_environment(self, clean_environment):
        with pytest.raises(ConfigurationError):
            await generate_command("list all files")

    async def test_unsupported_shell(self, live_config):
        with pytest.raises(ConfigurationError, match="Unsupported shell 'fish'"):
            await generate_command("list all files", "fish", config=live_config)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_shell("powershell")

    @pytest.mark.parametrize(
        "value,expected",
        [("bash", Shell.BASH), ("ZSH", Shell.ZSH), (Shell.ZSH, Shell.ZSH)],
    )
    def test_resolve_shell(self, value, expected):
        assert resolve_shell(value) is expected


class TestLiveGeneration:
    """Generation through the mocked OpenAI client."""

    async def test_successful_generation(
        self, live_config, mock_openai, completion, sample_description
    ):
        mock_openai.return_value = completion(
            "Command: ls -la\nExplanation: Lists files\n"
            "Commands:\n- ls -lah\n- ls -la"
        )

        result = await generate_command(
            sample_description, Shell.ZSH, config=live_config
        )

        assert result.command == "ls -la"
        assert result.explanation == "Lists files"
        assert result.alternatives == ["ls -lah"]
        assert result.raw_response.startswith("Command: ls -la")
        mock_openai.assert_awaited_once()

    async def test_request_uses_shell_model_and_prompt(
        self, live_config, mock_openai, completion
    ):
        mock_openai.return_value = completion("Command: ls")

        await generate_command(
            "list all files",
            "zsh",
            system_prompt="Be brief.",
            model="gpt-4.1",
            config=live_config,
        )

        kwargs = mock_openai.call_args.kwargs
        assert kwargs["model"] == "gpt-4.1"
        assert kwargs["messages"][0]["content"] == "Be brief."
        assert kwargs["messages"][1]["content"] == "Description: list all files"

    async def test_default_prompt_names_shell(
        self, live_config, mock_openai, completion
    ):
        mock_openai.return_value = completion("Command: ls")

        await generate_command("list all files", "zsh", config=live_config)

        system = mock_openai.call_args.kwargs["messages"][0]["content"]
        assert "expert zsh assistant" in system

    async def test_dangerous_reply_blocked(
        self, live_config, mock_openai, completion, sample_replies
    ):
        mock_openai.return_value = completion(sample_replies["dangerous"])

        with pytest.raises(SafetyBlockedError):
            await generate_command("clean everything up", config=live_config)

    async def test_backend_failure(
        self, valid_api_key, mock_openai, network_error
    ):
        mock_openai.side_effect = network_error
        config = GeneratorConfig(
            api_key=valid_api_key, disable_machine_context=True, max_retries=1
        )

        with pytest.raises(BackendError) as exc_info:
            await generate_command("list all files", config=config)

        assert exc_info.value.attempts == 1


class TestHelpers:
    def test_result_from_reply_keeps_raw(self):
        result = result_from_reply("Command: pwd")

        assert result.command == "pwd"
        assert result.raw_response == "Command: pwd"

    def test_generate_command_sync(self, reply_config, sample_replies):
        result = generate_command_sync(
            "list all files", config=reply_config(sample_replies["labelled"])
        )

        assert result.command == "ls -la"

    def test_generate_command_sync_guidance(self):
        result = generate_command_sync("ls", config=GeneratorConfig())

        assert result.command == GUIDANCE_COMMAND
