"""Whitespace tokenizer for RSVP word sequences.

WHY: The engine presents one token at a time, and a token is whatever
sits between runs of whitespace. Punctuation stays attached to its word
("world!") so the pause rules in timing.py can see it.

HOW: ``str.split()`` with no separator splits on runs of any Unicode
whitespace and drops empty strings, which covers leading and trailing
whitespace as well.

RULES:
- Tokens are non-empty and contain no whitespace
- Order is presentation order
- Empty or whitespace-only input yields an empty list, never an error
"""

from __future__ import annotations


def tokenize(raw: str) -> list[str]:
    """Split raw text into presentation tokens.

    >>> tokenize("Hello,   world!")
    ['Hello,', 'world!']
    """
    return raw.split()


def format_word_count(count: int) -> str:
    """Return a "N words" label, singular for exactly one word."""
    return "{} word{}".format(count, "" if count == 1 else "s")
