"""Per-word display delay.

WHY: A fixed words-per-minute rate gives every word the same slot, but
readers need a beat after a sentence or clause ends. Words that end in a
pause character get their slot stretched by a multiplier.

RULES:
- Base delay is 60000 / wpm milliseconds
- A word whose last character is in ``punctuation`` is multiplied by
  ``multiplier``
- The result is strictly positive for positive wpm and multiplier
"""

from __future__ import annotations

from typing import AbstractSet

MS_PER_MINUTE = 60000.0

MIN_DELAY_MS = 1.0
"""Floor applied after drift correction so a timer is never scheduled at <= 0."""


def ends_with_pause(word: str, punctuation: AbstractSet[str]) -> bool:
    """True if the word's final character is a pause character."""
    return bool(word) and word[-1] in punctuation


def compute_delay(
    word: str,
    wpm: int,
    multiplier: float,
    punctuation: AbstractSet[str],
) -> float:
    """Return how long ``word`` stays on screen, in milliseconds."""
    delay = MS_PER_MINUTE / wpm
    if ends_with_pause(word, punctuation):
        delay *= multiplier
    return delay


def corrected_delay(nominal_ms: float, drift_ms: float) -> float:
    """Subtract the previous cycle's drift from a nominal delay, floored at 1 ms."""
    return max(MIN_DELAY_MS, nominal_ms - drift_ms)
