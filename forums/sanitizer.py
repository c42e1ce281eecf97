"""
Forum Tools - Content Sanitizer

Neutralizes user-generated forum text before it reaches the LLM.

Two passes:
1. Markup-like characters (< > [ ] { }) become full-width lookalikes, so
   nothing in a post can pose as an XML tag, an [INST] block or a template.
2. Phrases that read like injection attempts ("ignore previous", "system
   prompt", "you are", ...) get a zero-width space between every character.
   They still read the same to a person but no longer match literally.

This degrades pattern matches, not meaning. It never drops characters:
output length is always >= input length.
"""

import re
from typing import List, Pattern

ZERO_WIDTH_SPACE = "\u200b"

# ASCII -> full-width forms
_LOOKALIKES = str.maketrans({
    "<": "\uff1c",
    ">": "\uff1e",
    "[": "\uff3b",
    "]": "\uff3d",
    "{": "\uff5b",
    "}": "\uff5d",
})

INJECTION_PATTERNS: List[Pattern[str]] = [
    re.compile(r"\b(ignore|disregard|forget)\s+(all\s+)?(previous|prior|above)", re.IGNORECASE),
    re.compile(r"\b(system|assistant|user|human)\s*(prompt|message|instruction)", re.IGNORECASE),
    re.compile(r"\b(you\s+are|act\s+as|pretend\s+to\s+be)", re.IGNORECASE),
]


def _break_phrase(match: "re.Match[str]") -> str:
    return ZERO_WIDTH_SPACE.join(match.group(0))


def sanitize_content(text: str) -> str:
    """
    Sanitize untrusted forum text.

    Args:
        text: Raw text extracted from a forum page

    Returns:
        Text with markup characters replaced and injection phrases broken up
    """
    if not text:
        return ""

    result = text.translate(_LOOKALIKES)
    for pattern in INJECTION_PATTERNS:
        result = pattern.sub(_break_phrase, result)
    return result
