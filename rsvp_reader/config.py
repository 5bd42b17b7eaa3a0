"""Configuration constants, ORP rule table, and .env loading.

WHY: Pacing limits, the punctuation pause, and the ORP rule table are
plain data, not logic. Keeping them in one place makes them easy to find,
tune, and override without touching the engine.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values, each overridable through an ``RSVP_*`` environment
variable. The ORP table can be replaced with a JSON document that is
validated with jsonschema before use. EngineConfig bundles everything the
engine reads into one immutable object.

RULES:
- ORP rules are ordered ascending by max_length and end with an unbounded
  rule (``math.inf``), so every word length matches exactly one rule
- Rate bounds satisfy 0 < MIN_WPM <= DEFAULT_WPM <= MAX_WPM
- Invalid configuration raises ValueError naming the offending setting
- Nothing here is mutated at runtime
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from typing import Any, Sequence

import jsonschema
from dotenv import load_dotenv

# Load .env from the project root (where the app is run from)
load_dotenv()


@dataclass(frozen=True)
class OrpRule:
    """One row of the ORP rule table.

    Attributes:
        max_length: Longest word (in characters) this rule covers.
                    ``math.inf`` for the final, unbounded rule.
        index: 0-based recognition index for words matching this rule.
    """

    max_length: float
    index: int


# ---------------------------------------------------------------------------
# ORP rule table
# ---------------------------------------------------------------------------

ORP_RULES_SCHEMA: dict = {
    "type": "array",
    "minItems": 1,
    "items": {
        "type": "object",
        "properties": {
            "max_length": {"type": ["integer", "null"], "minimum": 1},
            "index": {"type": "integer", "minimum": 0},
        },
        "required": ["max_length", "index"],
        "additionalProperties": False,
    },
}
"""JSON Schema for ``RSVP_ORP_RULES``. A ``null`` max_length is unbounded."""

DEFAULT_ORP_RULES: tuple[OrpRule, ...] = (
    OrpRule(max_length=1, index=0),          # 1 letter: 1st letter
    OrpRule(max_length=5, index=1),          # 2-5 letters: 2nd letter
    OrpRule(max_length=9, index=2),          # 6-9 letters: 3rd letter
    OrpRule(max_length=13, index=3),         # 10-13 letters: 4th letter
    OrpRule(max_length=math.inf, index=4),   # 14+ letters: 5th letter
)


def validate_orp_rules(rules: Sequence[OrpRule]) -> tuple[OrpRule, ...]:
    """Check that an ORP rule table covers every word length exactly once.

    WHY: The engine picks the first rule whose max_length is >= the word's
    length. An unsorted table would shadow rules, and a table without an
    unbounded tail would leave long words unmatched.

    RULES:
    - At least one rule
    - max_length strictly ascending
    - Only the final rule is unbounded, and it must be
    - Indices are non-negative

    Returns:
        The rules as a tuple.
    """
    rules = tuple(rules)
    if not rules:
        raise ValueError("ORP rule table is empty.")

    previous = 0.0
    for position, rule in enumerate(rules):
        if rule.index < 0:
            raise ValueError(
                "ORP rule {} has a negative index ({}).".format(position, rule.index)
            )
        if rule.max_length <= previous:
            raise ValueError(
                "ORP rules must be ascending by max_length; rule {} "
                "({}) follows {}.".format(position, rule.max_length, previous)
            )
        if math.isinf(rule.max_length) and position != len(rules) - 1:
            raise ValueError(
                "Only the final ORP rule may be unbounded (rule {}).".format(position)
            )
        previous = rule.max_length

    if not math.isinf(rules[-1].max_length):
        raise ValueError("The final ORP rule must be unbounded (max_length null).")
    return rules


def parse_orp_rules(raw: str) -> tuple[OrpRule, ...]:
    """Parse and validate an ORP rule table from a JSON string.

    Example::

        [{"max_length": 3, "index": 0}, {"max_length": null, "index": 1}]

    Raises:
        ValueError: If the JSON is malformed, fails schema validation, or
                    describes an inconsistent table.
    """
    try:
        document: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("RSVP_ORP_RULES is not valid JSON: {}".format(exc)) from exc

    try:
        jsonschema.validate(instance=document, schema=ORP_RULES_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise ValueError("RSVP_ORP_RULES is invalid: {}".format(exc.message)) from exc

    rules = [
        OrpRule(
            max_length=math.inf if item["max_length"] is None else item["max_length"],
            index=item["index"],
        )
        for item in document
    ]
    return validate_orp_rules(rules)


def _orp_rules_from_env() -> tuple[OrpRule, ...]:
    raw = os.getenv("RSVP_ORP_RULES", "").strip()
    if not raw:
        return DEFAULT_ORP_RULES
    return parse_orp_rules(raw)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        raise ValueError("{} must be an integer, got {!r}.".format(name, raw)) from None


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        raise ValueError("{} must be a number, got {!r}.".format(name, raw)) from None


# ---------------------------------------------------------------------------
# Rate and pause defaults
# ---------------------------------------------------------------------------

DEFAULT_WPM = _int_from_env("RSVP_DEFAULT_WPM", 300)
MIN_WPM = _int_from_env("RSVP_MIN_WPM", 200)
MAX_WPM = _int_from_env("RSVP_MAX_WPM", 1000)
WPM_STEP = _int_from_env("RSVP_WPM_STEP", 25)

PUNCTUATION_PAUSE_MULTIPLIER = _float_from_env("RSVP_PAUSE_MULTIPLIER", 1.5)
"""Delay multiplier for words ending in a PAUSE_PUNCTUATION character."""

PAUSE_PUNCTUATION: frozenset = frozenset(os.getenv("RSVP_PAUSE_PUNCTUATION", ".!?;"))
"""Sentence- and clause-terminating characters that earn a longer pause."""

ORP_RULES: tuple[OrpRule, ...] = _orp_rules_from_env()

SAMPLE_TEXT = (
    "Speed reading is a collection of methods for increasing reading speed "
    "without significantly reducing comprehension. It allows you to absorb "
    "written content faster than traditional reading. This technology uses "
    "RSVP to display words one at a time at a fixed focal point, eliminating "
    "the need for eye movement across the page."
)
"""Demo passage for presentation layers that want something to show."""


@dataclass(frozen=True)
class EngineConfig:
    """Everything the playback engine reads, bundled and validated.

    WHY: Tests and embedding applications need engines with different
    limits side by side. Passing one immutable object is simpler than
    reaching for module globals from inside the engine.

    HOW: Defaults come from the module constants above (already env-aware).
    ``from_env()`` re-reads the environment for callers that change it
    after import.

    RULES:
    - 0 < min_wpm <= default_wpm <= max_wpm
    - wpm_step > 0 and pause_multiplier > 0
    - orp_rules passes validate_orp_rules()
    """

    default_wpm: int = DEFAULT_WPM
    min_wpm: int = MIN_WPM
    max_wpm: int = MAX_WPM
    wpm_step: int = WPM_STEP
    pause_multiplier: float = PUNCTUATION_PAUSE_MULTIPLIER
    pause_punctuation: frozenset = PAUSE_PUNCTUATION
    orp_rules: tuple[OrpRule, ...] = ORP_RULES

    def __post_init__(self) -> None:
        if self.min_wpm <= 0:
            raise ValueError("min_wpm must be positive, got {}.".format(self.min_wpm))
        if self.min_wpm > self.max_wpm:
            raise ValueError(
                "min_wpm ({}) exceeds max_wpm ({}).".format(self.min_wpm, self.max_wpm)
            )
        if not self.min_wpm <= self.default_wpm <= self.max_wpm:
            raise ValueError(
                "default_wpm ({}) is outside [{}, {}].".format(
                    self.default_wpm, self.min_wpm, self.max_wpm
                )
            )
        if self.wpm_step <= 0:
            raise ValueError("wpm_step must be positive, got {}.".format(self.wpm_step))
        if self.pause_multiplier <= 0:
            raise ValueError(
                "pause_multiplier must be positive, got {}.".format(self.pause_multiplier)
            )
        # Normalise so callers may pass lists or strings.
        object.__setattr__(self, "orp_rules", validate_orp_rules(self.orp_rules))
        object.__setattr__(self, "pause_punctuation", frozenset(self.pause_punctuation))

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "EngineConfig":
        """Build a config from the current environment.

        Args:
            env_file: Optional .env path to load first. Existing environment
                      variables win over values in the file.
        """
        if env_file is not None:
            load_dotenv(env_file)
        return cls(
            default_wpm=_int_from_env("RSVP_DEFAULT_WPM", 300),
            min_wpm=_int_from_env("RSVP_MIN_WPM", 200),
            max_wpm=_int_from_env("RSVP_MAX_WPM", 1000),
            wpm_step=_int_from_env("RSVP_WPM_STEP", 25),
            pause_multiplier=_float_from_env("RSVP_PAUSE_MULTIPLIER", 1.5),
            pause_punctuation=frozenset(os.getenv("RSVP_PAUSE_PUNCTUATION", ".!?;")),
            orp_rules=_orp_rules_from_env(),
        )

