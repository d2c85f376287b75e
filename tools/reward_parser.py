"""
Reward Parser — Extracts award tags from generated story text.

Grammar (keywords are case-sensitive, tags may appear anywhere, any number
of times):
    [ITEM: <name>]    name is any run of non-']' characters, trimmed
    [GOLD: <digits>]  nonnegative integer

Tags are removed from the displayed text. Item names keep the order they
appear in the text; gold amounts are summed.
"""

import logging
import re
from typing import List, Tuple

logger = logging.getLogger("RewardParser")

_ITEM_RE = re.compile(r"\[ITEM:\s*([^\]]+)\]")
_GOLD_RE = re.compile(r"\[GOLD:\s*([0-9]+)\]")

# The instruction every backend prompt carries so the tags above come back.
AWARD_GUIDELINE = (
    "If the player is receiving something, give them some item or amount of gold "
    "that fits within the context of the situation. Use tags [ITEM: Name] and/or "
    "[GOLD: Amount] in your response when you award items or gold."
)


def parse_awards(text: str) -> Tuple[str, List[str], int]:
    """Strip award tags from `text`.

    Returns:
        (clean_text, item_names, gold_total). Text without any tag is
        returned exactly as given.
    """
    spans: List[Tuple[int, int]] = []
    item_hits: List[Tuple[int, str]] = []
    gold_total = 0

    for m in _ITEM_RE.finditer(text):
        spans.append(m.span())
        name = m.group(1).strip()
        if name:
            item_hits.append((m.start(), name))
        else:
            logger.debug("Dropped item tag with empty name")

    for m in _GOLD_RE.finditer(text):
        # A gold tag swallowed by a malformed item tag goes with it.
        if any(s < m.end() and m.start() < e for s, e in spans):
            continue
        spans.append(m.span())
        gold_total += int(m.group(1))

    if not spans:
        return text, [], 0

    # Delete back to front so earlier offsets stay valid.
    chars = list(text)
    for start, end in sorted(spans, reverse=True):
        del chars[start:end]

    items = [name for _, name in sorted(item_hits)]
    logger.info(f"Parsed awards: items={items}, gold={gold_total}")
    return _tidy("".join(chars)), items, gold_total


_SPACE_RUN_RE = re.compile(r" {2,}")


def _tidy(text: str) -> str:
    return _SPACE_RUN_RE.sub(" ", text).strip()
