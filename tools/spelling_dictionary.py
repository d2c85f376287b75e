"""
Spelling dictionary capability.

The spell checker only talks to the `SpellingDictionary` protocol so any
provider (OS checker, hunspell binding, test double) can be injected.
`WordListDictionary` is the bundled provider: a plain word list with
difflib-based suggestions.
"""

import difflib
import logging
import re
from typing import Iterable, List, Optional, Protocol, Tuple

logger = logging.getLogger("SpellingDictionary")

Span = Tuple[int, int]  # (start, end) offsets into the text, end exclusive

_TOKEN_RE = re.compile(r"[^\W\d_]+(?:'[^\W\d_]+)*")


class SpellingDictionary(Protocol):
    def misspelled_range(self, text: str, start: int) -> Optional[Span]:
        """Return the span of the first misspelled word at or after `start`."""
        ...

    def suggestions(self, text: str, span: Span) -> List[str]:
        """Return replacement candidates for the word at `span`, best first."""
        ...


def _match_case(template: str, word: str) -> str:
    if template.isupper() and len(template) > 1:
        return word.upper()
    if template[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


class WordListDictionary:
    """Dictionary backed by an in-memory set of known words.

    Args:
        words: Known words. Matching is case-insensitive.
        max_suggestions: Upper bound on candidates returned per word.
        cutoff: difflib similarity threshold (0..1) for suggestions.
    """

    def __init__(self, words: Iterable[str], max_suggestions: int = 5, cutoff: float = 0.75):
        self._words = {w.strip().lower() for w in words if w and w.strip()}
        self._ordered = sorted(self._words)
        self.max_suggestions = max_suggestions
        self.cutoff = cutoff

    @classmethod
    def from_file(cls, path: str, **kwargs) -> "WordListDictionary":
        """Load a one-word-per-line list (e.g. /usr/share/dict/words)."""
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            words = [line.strip() for line in f]
        logger.info(f"Loaded {len(words)} words from {path}")
        return cls(words, **kwargs)

    def __contains__(self, word: str) -> bool:
        return word.lower() in self._words

    def __len__(self) -> int:
        return len(self._words)

    def misspelled_range(self, text: str, start: int) -> Optional[Span]:
        # An empty list knows nothing, so it flags nothing.
        if not self._words:
            return None
        for match in _TOKEN_RE.finditer(text, max(0, start)):
            # Part of a longer run ("2nd", a word cut by the cursor).
            before = text[match.start() - 1] if match.start() > 0 else ""
            after = text[match.end()] if match.end() < len(text) else ""
            if before.isalnum() or after.isalnum():
                continue
            if match.group(0).lower() not in self._words:
                return match.span()
        return None

    def suggestions(self, text: str, span: Span) -> List[str]:
        token = text[span[0]:span[1]]
        if not token:
            return []
        guesses = difflib.get_close_matches(
            token.lower(), self._ordered, n=self.max_suggestions, cutoff=self.cutoff
        )
        return [_match_case(token, g) for g in guesses]
