"""
Spell Checker — Sentence-level correction of player actions.

Walks the text one misspelling at a time, splicing each replacement into a
working copy so later lookups see already-corrected text. Inventory names
and anything inside quotes or brackets are left alone.

Pure function of its inputs plus the injected dictionary. No state.
"""

import logging
from typing import Iterable, List, Optional, Set

from models.gameplay import SpellCheckResult
from models.messages import TextSegment
from tools.spelling_dictionary import SpellingDictionary, Span

logger = logging.getLogger("SpellChecker")

# Mistakes tolerated per action before the allowance hits zero.
MISTAKE_ALLOWANCE = 5


def is_inside_delimiters(text: str, span: Span) -> bool:
    """True if `span` sits between an unmatched opener before it and a closer after it.

    Counts raw characters: an odd number of `"` on both sides, or an odd
    number of `[` before and `]` after. Nesting and escapes are not
    understood.
    """
    before = text[:span[0]]
    after = text[span[1]:]
    if before.count('"') % 2 == 1 and after.count('"') % 2 == 1:
        return True
    if before.count("[") % 2 == 1 and after.count("]") % 2 == 1:
        return True
    return False


def _best_suggestion(
    token: str,
    span: Span,
    text: str,
    dictionary: SpellingDictionary,
    domain_terms: Set[str],
    domain_lower: Set[str],
) -> Optional[str]:
    if token in domain_terms or token.lower() in domain_lower:
        return None
    if is_inside_delimiters(text, span):
        return None

    guesses = dictionary.suggestions(text, span) or []
    for guess in guesses:
        if guess.lower() in domain_lower:
            return guess
    return guesses[0] if guesses else None


def _append(segments: List[TextSegment], text: str, corrected: bool = False):
    if not text:
        return
    if segments and not corrected and not segments[-1].corrected:
        segments[-1].text += text
        return
    segments.append(TextSegment(text=text, corrected=corrected))


def analyze(
    text: str,
    protected_terms: Iterable[str],
    dictionary: SpellingDictionary,
) -> SpellCheckResult:
    """Correct `text` and score it.

    Args:
        text: The player's action.
        protected_terms: Words that must never be changed (inventory names).
            Matched exactly and case-insensitively.
        dictionary: Provider that finds misspellings and proposes fixes.

    Returns:
        SpellCheckResult with display segments (corrections flagged), the
        corrected string, the number of corrections, and
        remaining_allowance = max(0, 5 - corrections).
    """
    domain_terms = {t.strip() for t in protected_terms if t and t.strip()}
    domain_lower = {t.lower() for t in domain_terms}

    working = text
    cursor = 0
    mistakes = 0
    segments: List[TextSegment] = []

    while True:
        miss = dictionary.misspelled_range(working, cursor)
        if miss is None:
            break
        start, end = miss
        if start < cursor or end <= start:
            logger.warning(f"Dictionary returned unusable span {miss} at cursor {cursor}; stopping")
            break

        _append(segments, working[cursor:start])

        token = working[start:end]
        suggestion = _best_suggestion(token, miss, working, dictionary, domain_terms, domain_lower)
        replacement = token if suggestion is None else suggestion

        changed = replacement != token
        if changed:
            mistakes += 1
            logger.debug(f"Corrected '{token}' -> '{replacement}'")
        _append(segments, replacement, corrected=changed)

        working = working[:start] + replacement + working[end:]
        cursor = start + len(replacement)

    _append(segments, working[cursor:])

    return SpellCheckResult(
        segments=segments,
        remaining_allowance=max(0, MISTAKE_ALLOWANCE - mistakes),
        corrected_text=working,
        mistakes=mistakes,
    )
