"""
Response parser for tasksh.

Model replies are free-form text. This module recovers a command, an
explanation and a list of alternative commands from them, tolerating code
fences, labelled lines, bulleted or numbered option lists and plain prose.
"""

import re
from typing import List, Optional

from tasksh.errors import ResponseParseError
from tasksh.generator.confidence import coerce_command
from tasksh.models.command_models import ParsedDraft
from tasksh.utils.logging import get_logger

logger = get_logger("generator.response_parser")

CODE_FENCE = "```"
FILLER_WORDS = frozenset({"the", "this", "that", "those", "uses", "use", "command"})

_NUMBERED_ITEM = re.compile(r"^(\d+)[).]\s+(?P<cmd>.+)$")


def looks_like_command(value: str) -> bool:
    """
    Cheap check that a string could be a shell command rather than prose.

    Args:
        value (str): Candidate text.

    Returns:
        bool: False for empty text, comments, and text opening with a
        lowercase filler word such as "the" or "use".
    """
    trimmed = value.strip()
    if not trimmed or trimmed.startswith("#"):
        return False

    # Case-sensitive: "Use grep foo" is kept
    return trimmed.split()[0] not in FILLER_WORDS


def parse_list_command(line: str) -> Optional[str]:
    """Pull a command out of a "- cmd", "1. cmd" or "1) cmd" list item."""
    trimmed = line.strip()
    if not trimmed:
        return None

    if trimmed.startswith("- "):
        candidate = trimmed[2:].strip()
        if looks_like_command(candidate):
            return candidate

    match = _NUMBERED_ITEM.match(trimmed)
    if match:
        candidate = match.group("cmd").strip()
        if looks_like_command(candidate):
            return candidate

    return None


def _value_after_prefix(line: str, prefix: str) -> Optional[str]:
    # prefix is lowercase and ends with ":"
    if not line.lower().startswith(prefix):
        return None
    value = line.split(":", 1)[1].strip()
    return value or None


def dedupe_alternatives(alternatives: List[str], command: str) -> List[str]:
    """
    Drop repeated, primary-equal and non-command alternatives.

    Comparison is case-insensitive and the first spelling seen is kept.
    """
    seen = set()
    result: List[str] = []
    primary = command.lower()

    for alt in alternatives:
        key = alt.lower()
        if key == primary or key in seen or not looks_like_command(alt):
            continue
        seen.add(key)
        result.append(alt)

    return result


def parse_completion_content(raw: str) -> ParsedDraft:
    """
    Parse a raw model reply into a draft command.

    Args:
        raw (str): Reply text from the model (or a fixture).

    Returns:
        ParsedDraft: Command, explanation, alternatives and confidence.

    Raises:
        ResponseParseError: If the reply holds nothing usable as a command.
    """
    command: Optional[str] = None
    explanation: Optional[str] = None
    explanation_line: Optional[str] = None
    body_lines: List[str] = []
    code_buffer: List[str] = []
    alternatives: List[str] = []
    in_code_block = False
    in_command_list = False

    for raw_line in raw.splitlines():
        line = raw_line.strip()

        if line.startswith(CODE_FENCE):
            in_code_block = not in_code_block
            if not in_code_block and code_buffer:
                block = "\n".join(code_buffer)
                if command is None:
                    command = block
                else:
                    body_lines.append(block)
                code_buffer = []
            continue

        if in_code_block:
            code_buffer.append(line)
            continue

        if not line:
            in_command_list = False
            continue

        value = _value_after_prefix(line, "command:")
        if value is not None:
            command = value
            continue

        value = _value_after_prefix(line, "explanation:")
        if value is not None:
            explanation = value
            explanation_line = line
            in_command_list = False
            continue

        if line.lower() == "commands:":
            in_command_list = True
        elif in_command_list:
            candidate = parse_list_command(line)
            if candidate:
                alternatives.append(candidate)
        else:
            body_lines.append(line)

    # An unterminated fence still counts as a code block
    if command is None and code_buffer:
        command = "\n".join(code_buffer)

    if command is None:
        if body_lines:
            command = body_lines.pop(0)
        elif explanation_line is not None:
            command = explanation_line
        else:
            logger.error("Reply contained no usable command")
            raise ResponseParseError("Response missing 'Command:' line")

    if explanation is None:
        explanation = " ".join(body_lines)

    cmd, confidence = coerce_command(command, raw)
    if not cmd:
        raise ResponseParseError("Response contained an empty command")

    logger.debug(
        f"Parsed command {cmd!r} ({confidence.value}) "
        f"with {len(alternatives)} alternative candidate(s)"
    )

    return ParsedDraft(
        command=cmd,
        explanation=explanation,
        alternatives=dedupe_alternatives(alternatives, cmd),
        confidence=confidence,
    )
