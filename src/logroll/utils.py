"""JSON helpers, deep merge, and time-pattern translation."""

from __future__ import annotations

import json
import re
from pathlib import Path

# Go reference-time tokens, longest first so "January" wins over "Jan".
_LAYOUT_TOKENS: list[tuple[str, str]] = [
    ("January", "%B"),
    ("Monday", "%A"),
    ("2006", "%Y"),
    ("Jan", "%b"),
    ("Mon", "%a"),
    ("MST", "%Z"),
    ("01", "%m"),
    ("02", "%d"),
    ("15", "%H"),
    ("03", "%I"),
    ("04", "%M"),
    ("05", "%S"),
    ("06", "%y"),
    ("PM", "%p"),
]

_DIRECTIVE_RE = re.compile(r"%[aAbBdHIjmMpSyYUWfzZ]")


def load_json(path: Path) -> dict:
    """Load a JSON file, returning empty dict if missing or malformed."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def save_json(path: Path, data: dict) -> None:
    """Save dict as pretty-printed JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def translate_layout(pattern: str) -> str:
    """Translate a Go-style reference layout (``2006-01-02``) to strftime.

    Patterns that already contain a ``%`` directive are returned unchanged.
    """
    if "%" in pattern:
        return pattern
    out: list[str] = []
    i = 0
    while i < len(pattern):
        for token, directive in _LAYOUT_TOKENS:
            if pattern.startswith(token, i):
                out.append(directive)
                i += len(token)
                break
        else:
            out.append(pattern[i])
            i += 1
    return "".join(out)


def has_time_directive(pattern: str) -> bool:
    """True if a strftime pattern renders something that changes over time."""
    return bool(_DIRECTIVE_RE.search(pattern))
