"""
Confidence classification for extracted command candidates.

Decides whether a candidate is directly runnable, is guidance text, or needs
the user to confirm it before anything is run.
"""

import re
from typing import Optional, Tuple

from tasksh.models.command_models import CommandConfidence

SENTENCE_OPENERS = frozenset({"the", "this", "that", "these", "those", "it"})

INCOMPLETE_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\b(the|this|that|those|it)\b",
        r"\buse\s+the\b",
        r"\bcommand\b",
    )
)


def extract_inline_code(text: str) -> Optional[str]:
    """
    Return the first non-empty `inline code` span in text.

    Args:
        text (str): Text that may contain backtick-delimited spans.

    Returns:
        Optional[str]: The trimmed span content, or None if there is none.
    """
    start = None
    for idx, ch in enumerate(text):
        if ch != "`":
            continue
        if start is None:
            start = idx + 1
            continue

        snippet = text[start:idx].strip()
        start = None
        if snippet:
            return snippet

    return None


def looks_like_sentence(value: str) -> bool:
    if "\n" in value:
        return False

    trimmed = value.strip()
    words = trimmed.split()
    if not words:
        return False

    if words[0].lower() in SENTENCE_OPENERS:
        return True

    return trimmed.endswith(".")


def looks_incomplete(value: str) -> bool:
    return any(pattern.search(value) for pattern in INCOMPLETE_PATTERNS)


def coerce_command(candidate: str, raw: str = "") -> Tuple[str, CommandConfidence]:
    """
    Normalize a command candidate and classify how far it can be trusted.

    The checks run in a fixed order: guidance comments, inline code in the
    candidate, prose sentences (with inline code from the whole reply as a
    fallback), then vague references such as "use the command".

    Args:
        candidate (str): Command text pulled out of the reply.
        raw (str): The complete reply the candidate came from.

    Returns:
        Tuple[str, CommandConfidence]: The normalized command and its
        confidence.
    """
    trimmed = candidate.strip()
    if not trimmed:
        return "", CommandConfidence.NEEDS_CONFIRMATION

    if trimmed.startswith("#"):
        return trimmed, CommandConfidence.CERTAIN

    inline = extract_inline_code(trimmed)
    if inline:
        return inline, CommandConfidence.CERTAIN

    if looks_like_sentence(trimmed):
        inline = extract_inline_code(raw)
        if inline:
            return inline, CommandConfidence.CERTAIN
        return f"# {trimmed}", CommandConfidence.NEEDS_CONFIRMATION

    if looks_incomplete(trimmed):
        return trimmed, CommandConfidence.NEEDS_CONFIRMATION

    return trimmed, CommandConfidence.CERTAIN
