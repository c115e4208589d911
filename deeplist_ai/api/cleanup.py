"""Cleanup for generated tool content (names, descriptions, prompts, welcome messages)."""

import re
from typing import Iterable, List

_OPTION_PREFIX_RES = (
    re.compile(r"^\s*\*\*Option \d+:\*\*\s*", re.IGNORECASE),
    re.compile(r"^\s*Option \d+:\s*", re.IGNORECASE),
)
_BOLD_RE = re.compile(r"\*\*")
_QUOTE_PAIRS = (("\"", "\""), ("'", "'"), ("“", "”"))


def lead_in_phrases(subject: str) -> List[str]:
    """Boilerplate openers models put before the requested text, e.g. "Here is the welcome message:"."""

    return [
        f"Here is the {subject}:",
        f"Here's the {subject}:",
        f"Okay, here is the {subject}:",
        f"Okay, here's the {subject}:",
        f"{subject[:1].upper()}{subject[1:]}:",
        f"The {subject}:",
    ]


def strip_option_prefix(text: str) -> str:
    for pattern in _OPTION_PREFIX_RES:
        text = pattern.sub("", text)
    return text


def strip_markdown_bold(text: str) -> str:
    return _BOLD_RE.sub("", text)


def strip_lead_ins(text: str, phrases: Iterable[str]) -> str:
    for phrase in phrases:
        if text.lower().startswith(phrase.lower()):
            text = text[len(phrase):].strip()
    return text


def strip_wrapping_quotes(text: str) -> str:
    for start, end in _QUOTE_PAIRS:
        if len(text) >= 2 and text.startswith(start) and text.endswith(end):
            return text[1:-1].strip()
    return text


def clean_generated_text(text: str, subject: str) -> str:
    """Apply every cleanup step in order and return the trimmed result."""

    text = strip_option_prefix(text.strip())
    text = strip_markdown_bold(text).strip()
    text = strip_lead_ins(text, lead_in_phrases(subject))
    return strip_wrapping_quotes(text)
