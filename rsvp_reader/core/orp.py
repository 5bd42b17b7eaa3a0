"""Optimal recognition point (ORP) lookup and word splitting.

WHY: An RSVP reader keeps the eye still by aligning every word on the
same fixation letter. Which letter that is depends only on the word's
length, as described by the configured ORP rule table.

HOW: compute_recognition_index() walks the ascending rule table and takes
the first rule that covers the word's length, then clamps the result to
the last character. present_word() uses that index to split the word
into the three pieces a renderer needs.

RULES:
- The index depends on len(word) only; punctuation and case are ignored
- The index is always within [0, len(word) - 1] for non-empty words
- Short words can clamp onto the same index as a different length class;
  this is intentional and keeps the lookup in range
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from rsvp_reader.config import OrpRule


@dataclass(frozen=True)
class WordPresentation:
    """One word split around its recognition character.

    This is the payload of the engine's word-changed callback. It is built
    on demand and never stored by the engine.

    Attributes:
        word: The full token, punctuation included.
        index: 0-based position of the recognition character.
        before: Text preceding the recognition character.
        focus: The recognition character itself.
        after: Text following the recognition character.
    """

    word: str
    index: int
    before: str
    focus: str
    after: str


def compute_recognition_index(word: str, rules: Sequence[OrpRule]) -> int:
    """Return the 0-based recognition index for ``word``.

    Args:
        word: The token to analyse.
        rules: ORP rule table, ascending by max_length, ending unbounded.

    Returns:
        ``min(rule.index, len(word) - 1)`` for the first matching rule,
        and 0 for an empty string.
    """
    length = len(word)
    for rule in rules:
        if length <= rule.max_length:
            return max(0, min(rule.index, length - 1))
    # A validated table always ends with an unbounded rule.
    return max(0, min(rules[-1].index, length - 1))


def present_word(word: str, rules: Sequence[OrpRule]) -> WordPresentation:
    """Split ``word`` into before / focus / after around its ORP."""
    index = compute_recognition_index(word, rules)
    return WordPresentation(
        word=word,
        index=index,
        before=word[:index],
        focus=word[index:index + 1],
        after=word[index + 1:],
    )
