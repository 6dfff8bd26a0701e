from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Shell(str, Enum):
    BASH = "bash"
    ZSH = "zsh"


class CommandConfidence(str, Enum):
    CERTAIN = "certain"
    NEEDS_CONFIRMATION = "needs_confirmation"


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str

    def to_openai(self) -> Dict[str, str]:
        """Render the message in the shape the chat completions API expects."""
        return {"role": self.role.value, "content": self.content}


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = Field(..., min_length=1)
    shell: Shell = Shell.BASH
    system_prompt: Optional[str] = Field(
        default=None, description="Replaces the default instructional template"
    )
    model: Optional[str] = Field(
        default=None, description="Chat model id; the default model when unset"
    )


class ParsedDraft(BaseModel):
    command: str
    explanation: str
    alternatives: List[str] = Field(default_factory=list)
    confidence: CommandConfidence = CommandConfidence.CERTAIN


class GeneratedCommand(BaseModel):
    command: str
    explanation: str
    raw_response: Optional[str] = None
    confidence: CommandConfidence = CommandConfidence.CERTAIN
    alternatives: List[str] = Field(default_factory=list)

    @property
    def is_guidance(self) -> bool:
        # Guidance text is meant to be read, never run
        return self.command.lstrip().startswith("#")

    @classmethod
    def from_draft(
        cls, draft: ParsedDraft, raw_response: Optional[str] = None
    ) -> "GeneratedCommand":
        return cls(
            command=draft.command,
            explanation=draft.explanation,
            raw_response=raw_response,
            confidence=draft.confidence,
            alternatives=list(draft.alternatives),
        )
