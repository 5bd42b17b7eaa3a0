"""RSVP Reader: a rapid serial visual presentation playback engine.

WHY: Reading one word at a time at a fixed focal point removes eye
movement across the line. Doing that well takes a small but careful
engine: whitespace tokenization, a per-word optimal recognition point,
punctuation-aware pacing, and a drift-corrected timer loop.

HOW: ``PlaybackEngine`` owns the words, the position, and the play/pause
state machine. It paces itself on a pluggable ``Scheduler`` (asyncio in
applications, a virtual clock in tests) and reports to whatever
presentation layer hosts it via word, progress, and completion callbacks.

RULES:
- The engine never renders, persists, or performs I/O
- Configuration lives in config.py and can be overridden via .env
"""

from rsvp_reader.config import EngineConfig, OrpRule
from rsvp_reader.core.engine import PlaybackEngine, PlaybackState
from rsvp_reader.core.orp import WordPresentation

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "OrpRule",
    "PlaybackEngine",
    "PlaybackState",
    "WordPresentation",
]
