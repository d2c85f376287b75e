"""
Content Filter — Line-based cleanup of generated story text.

Fast (no LLM calls). Applied to every continuation before it is shown, to
drop formatting the backend was told not to produce: option lists and
leftover control tags.
"""

import re
import logging
from typing import List

logger = logging.getLogger("ContentFilter")

# A line is dropped when its trimmed form matches any of these.
_DROP_PATTERNS = [
    r"^-",          # bulleted option
    r"^\d+\.",      # numbered option ("1. Open the door")
    r"^\[.*\]",     # bracket tag remnant ("[ITEM: ...]", "[GOLD: lots]")
]

_COMPILED_PATTERNS = [re.compile(pattern) for pattern in _DROP_PATTERNS]


def is_directive_line(line: str) -> bool:
    stripped = line.strip()
    return any(p.search(stripped) for p in _COMPILED_PATTERNS)


def sanitize_story_text(text: str) -> str:
    """Remove blank lines, option lists and bracket-tag lines.

    Returns the remaining lines joined by newlines. May return an empty
    string when every line was dropped; the caller decides what to show.
    """
    kept: List[str] = []
    dropped = 0
    for line in text.splitlines():
        if not line.strip():
            continue
        if is_directive_line(line):
            dropped += 1
            continue
        kept.append(line)

    if dropped:
        logger.warning(f"Dropped {dropped} directive line(s) from story text")

    return "\n".join(kept)
