"""Keyword matching over normalized text.

Word characters are ASCII letters, digits and underscore, so "ice" never
matches inside "spice" or "precision". Single-token phrases are counted as
whole words. Multi-token phrases ("fuel starvation", "human-in-the-loop")
are matched against a sliding window of text tokens where each token only
has to contain its phrase part, which tolerates inflections such as
"wind shears".
"""

import re
from functools import lru_cache
from typing import NamedTuple, Optional

# A token is a run of word characters, optionally joined by internal hyphens.
TOKEN_PATTERN = re.compile(r'\w+(?:-\w+)*', re.ASCII)
PHRASE_SEPARATOR = re.compile(r'[-\s]+')
WHITESPACE = re.compile(r'\s+')


class KeywordOccurrence(NamedTuple):
    """Result of searching text for one keyword phrase."""
    found: bool
    count: int


def normalize_text(text: str) -> str:
    """Lowercase, collapse whitespace runs to single spaces and trim."""
    return WHITESPACE.sub(' ', text.lower()).strip()


def tokenize(text: str) -> list[str]:
    """Split normalized text into word tokens."""
    return TOKEN_PATTERN.findall(text)


def phrase_parts(phrase: str) -> list[str]:
    """Split a keyword phrase on hyphens and whitespace."""
    return [part for part in PHRASE_SEPARATOR.split(phrase.lower()) if part]


@lru_cache(maxsize=2048)
def _word_pattern(word: str) -> re.Pattern:
    return re.compile(r'\b' + re.escape(word) + r'\b', re.ASCII)


def occurrences(text: str, phrase: str, tokens: Optional[list[str]] = None) -> KeywordOccurrence:
    """Count occurrences of ``phrase`` in normalized ``text``.

    Args:
        text: Text already passed through ``normalize_text``.
        phrase: Keyword phrase from the taxonomy.
        tokens: Pre-computed ``tokenize(text)``, reused across phrases.

    Returns:
        Whether the phrase was found and how many times. Multi-word windows
        advance one token at a time, so overlapping matches all count.
    """
    parts = phrase_parts(phrase)
    if not parts:
        return KeywordOccurrence(False, 0)

    if len(parts) == 1:
        count = len(_word_pattern(parts[0]).findall(text))
        return KeywordOccurrence(count > 0, count)

    if tokens is None:
        tokens = tokenize(text)

    width = len(parts)
    count = 0
    for start in range(len(tokens) - width + 1):
        if all(part in tokens[start + offset] for offset, part in enumerate(parts)):
            count += 1

    return KeywordOccurrence(count > 0, count)
