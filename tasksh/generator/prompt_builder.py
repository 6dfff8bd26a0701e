"""
Prompt builder for tasksh.

This module builds the chat messages sent to the model: an instructional
system prompt (optionally grounded with host context) and the user's task
description.
"""

from typing import List, Optional, Union

from tasksh.config.environment import GeneratorConfig
from tasksh.generator.constants import DEFAULT_MODEL
from tasksh.models.command_models import (
    ChatMessage,
    GenerationRequest,
    MessageRole,
    Shell,
)
from tasksh.utils import platform_utils


class PromptBuilder:
    """
    Builder for the messages of a command generation request.

    The instructions ask the model for a small labelled layout
    (Command:/Explanation:, or a Commands: list) that the response parser
    knows how to read back.
    """

    SYSTEM_TEMPLATE = (
        "You are an expert {shell} assistant.\n"
        "Task: {description}\n"
        "Requirements:\n"
        "1. When confident, reply using:\n"
        "   Command: <single {shell} command>\n"
        "   Explanation: <short justification>\n"
        "2. When unsure or multiple safe approaches exist, reply using:\n"
        "   Commands:\n"
        "   - <command option 1>\n"
        "   - <command option 2>\n"
        "   Explanation: <how to choose / warnings>\n"
        "3. Never fabricate output (avoid echoing statements unless the user "
        "explicitly wants a literal message).\n"
        "4. Prefer real inspection commands (e.g., hostname, uname -a, sysctl, "
        "system_profiler) for environment questions.\n"
        "5. Guidance-only responses must start with '#'."
    )

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """
        Initialize the prompt builder.

        Args:
            config (Optional[GeneratorConfig]): Pipeline configuration; only
                the host-context settings are used here.
        """
        self.config = config or GeneratorConfig()

    def build_system_prompt(
        self, description: str, shell: Union[Shell, str]
    ) -> str:
        shell_name = shell.value if isinstance(shell, Shell) else str(shell)
        return self.SYSTEM_TEMPLATE.format(shell=shell_name, description=description)

    def host_context(self) -> str:
        """
        Describe the machine the command will run on.

        Returns:
            str: One line naming the OS, CPU architecture and login shell.
        """
        info = platform_utils.get_platform_info()
        os_name = (info.get("os_name") or "unknown").lower()
        arch = info.get("architecture") or "unknown"
        shell = self.config.user_shell or "unknown"
        return f"Host context: os={os_name}, arch={arch}, shell={shell}."

    def append_machine_context(self, prompt: str) -> str:
        if self.config.disable_machine_context:
            return prompt
        return f"{prompt}\n\n{self.host_context()}"

    def build_messages(self, request: GenerationRequest) -> List[ChatMessage]:
        """
        Build the system and user messages for one attempt.

        Args:
            request (GenerationRequest): The generation request.

        Returns:
            List[ChatMessage]: Exactly two messages, system first.
        """
        system_prompt = request.system_prompt or self.build_system_prompt(
            request.description, request.shell
        )

        return [
            ChatMessage(
                role=MessageRole.SYSTEM,
                content=self.append_machine_context(system_prompt),
            ),
            ChatMessage(
                role=MessageRole.USER,
                content=f"Description: {request.description}",
            ),
        ]

    def build_chat_request(self, request: GenerationRequest) -> dict:
        """
        Build keyword arguments for chat.completions.create().

        Args:
            request (GenerationRequest): The generation request.

        Returns:
            dict: model, temperature and messages.
        """
        return {
            "model": request.model or DEFAULT_MODEL,
            "temperature": self.config.temperature,
            "messages": [m.to_openai() for m in self.build_messages(request)],
        }
