"""Follow-up suggestion parsing.

Model output is run through an ordered chain of pure strategies; the first one
that yields a non-empty list wins. When every strategy comes back empty the
caller falls back to ``fallback_suggestions``.
"""

import json
import re
from typing import Any, Callable, List, Optional, Sequence

MAX_SUGGESTIONS = 3
MAX_LINE_SUGGESTION_CHARS = 50

ParseStrategy = Callable[[str], Optional[List[str]]]

_JSON_FRAGMENT_RE = re.compile(r"\{[\s\S]*\"suggestions\"[\s\S]*\}")
_NUMBERING_RE = re.compile(r"^\d+\.\s*")
_BULLET_RE = re.compile(r"^[-*]\s*")


def _from_parsed(parsed: Any) -> Optional[List[str]]:
    if not isinstance(parsed, dict):
        return None
    items = parsed.get("suggestions")
    if not isinstance(items, list):
        return None
    cleaned = [s.strip() for s in items if isinstance(s, str) and s.strip()]
    return cleaned[:MAX_SUGGESTIONS] or None


def parse_json_suggestions(content: str) -> Optional[List[str]]:
    """The whole response is the JSON object."""

    try:
        return _from_parsed(json.loads(content.strip()))
    except ValueError:
        return None


def parse_embedded_json_suggestions(content: str) -> Optional[List[str]]:
    """A ``{... "suggestions" ...}`` object wrapped in prose or a code fence."""

    match = _JSON_FRAGMENT_RE.search(content)
    if not match:
        return None
    try:
        return _from_parsed(json.loads(match.group(0)))
    except ValueError:
        return None


def _clean_line(line: str) -> str:
    line = _NUMBERING_RE.sub("", line.strip())
    line = _BULLET_RE.sub("", line)
    line = line.strip().rstrip(",").strip()
    if line[:1] in ("\"", "'"):
        line = line[1:]
    if line[-1:] in ("\"", "'"):
        line = line[:-1]
    return line.strip()


def parse_line_suggestions(content: str) -> Optional[List[str]]:
    """Numbered or bulleted lines, one suggestion per line."""

    results = []
    for raw in content.splitlines():
        line = _clean_line(raw)
        if not line or len(line) >= MAX_LINE_SUGGESTION_CHARS:
            continue
        if "{" in line or "}" in line:
            continue
        results.append(line)
        if len(results) == MAX_SUGGESTIONS:
            break
    return results or None


PARSE_STRATEGIES: Sequence[ParseStrategy] = (
    parse_json_suggestions,
    parse_embedded_json_suggestions,
    parse_line_suggestions,
)


def parse_suggestions(content: str, strategies: Sequence[ParseStrategy] = PARSE_STRATEGIES) -> List[str]:
    for strategy in strategies:
        result = strategy(content)
        if result:
            return result[:MAX_SUGGESTIONS]
    return []


def fallback_suggestions(tool_name: str = "") -> List[str]:
    name = (tool_name or "").strip()
    if name:
        return [
            f"How does {name} work?",
            f"What can I do with {name}?",
            "Show me examples",
        ]
    return [
        "Tell me more",
        "How do I get started?",
        "What are the main features?",
    ]
