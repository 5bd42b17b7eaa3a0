"""RSVP playback engine: word sequence, state machine, and paced advance loop.

WHY: Presenting one word at a time at a steady rate needs a component that
owns the tokenized text, the current position, and a self-rescheduling
timer. Rendering, settings panels, and persistence all sit outside; they
talk to the engine through three callbacks and a handful of methods.

HOW: load_text() tokenizes and resets. start() shows the current word and
schedules one transition on the injected Scheduler. Each transition
measures how late it fired, advances the position, notifies listeners,
and schedules the next word with that lateness (drift) subtracted from
its nominal delay. Pausing, resetting, or loading cancels the single
pending transition before returning.

RULES:
- Outside an in-flight transition, PLAYING iff exactly one transition is
  pending
- 0 <= position <= word count; position == word count means exhausted
- Rate is clamped to [min_wpm, max_wpm] and only affects the next delay
- Drift from cycle n corrects cycle n+1; start/resume begins with 0 drift
- Corrected delays are floored at 1 ms
- Callbacks run synchronously on the scheduler's thread; their exceptions
  propagate
- No operation raises for empty text, out-of-range rates, or calls made in
  a state where they do nothing
"""

from __future__ import annotations

import enum
import functools
import logging
from typing import Callable

from rsvp_reader.config import EngineConfig
from rsvp_reader.core.orp import WordPresentation, compute_recognition_index, present_word
from rsvp_reader.core.timing import compute_delay, corrected_delay
from rsvp_reader.core.tokenizer import tokenize
from rsvp_reader.scheduling.asyncio_scheduler import AsyncioScheduler
from rsvp_reader.scheduling.base import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

WordCallback = Callable[[WordPresentation], None]
ProgressCallback = Callable[[float], None]
CompleteCallback = Callable[[], None]


class PlaybackState(str, enum.Enum):
    """Playback lifecycle states.

    RULES:
    - idle: fresh engine or text just loaded; nothing scheduled
    - playing: exactly one transition pending
    - paused: stopped mid-sequence (or reset); position kept
    - completed: the last word's slot elapsed; start() replays from 0
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"


def _noop(*_args) -> None:
    return None


class PlaybackEngine:
    """Paces a word sequence through word/progress/completion callbacks.

    Example:
        engine = PlaybackEngine(
            on_word=lambda w: print(w.before, w.focus, w.after),
            on_progress=lambda pct: print("{:.0f}%".format(pct)),
        )
        engine.load_text("Speed reading, one word at a time.")
        engine.set_rate(450)
        engine.start()

    Without an explicit ``scheduler`` the engine uses AsyncioScheduler, so
    start() must then be called while an asyncio event loop is running
    (load_text(), reset(), and the accessors need no loop). Outside a loop,
    start() raises RuntimeError from ``asyncio.get_running_loop()``.
    """

    def __init__(
        self,
        on_word: WordCallback | None = None,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
        *,
        scheduler: Scheduler | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._on_word: WordCallback = on_word or _noop
        self._on_progress: ProgressCallback = on_progress or _noop
        self._on_complete: CompleteCallback = on_complete or _noop

        self._config = config or EngineConfig()
        self._scheduler = scheduler or AsyncioScheduler()

        self._words: tuple[str, ...] = ()
        self._position = 0
        self._rate = self._config.default_wpm
        self._state = PlaybackState.IDLE
        self._pending: TimerHandle | None = None
        self._generation = 0
        self._drift_ms = 0.0

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def rate(self) -> int:
        """Current words-per-minute rate."""
        return self._rate

    @property
    def position(self) -> int:
        return self._position

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    @property
    def drift_ms(self) -> float:
        """Signed lateness measured by the most recent transition."""
        return self._drift_ms

    def has_text(self) -> bool:
        return bool(self._words)

    def get_word_count(self) -> int:
        return len(self._words)

    def get_progress(self) -> float:
        """Percentage of the sequence already shown, 0 to 100."""
        if not self._words:
            return 0.0
        return self._position / len(self._words) * 100.0

    def current_word(self) -> WordPresentation | None:
        """Presentation record for the word at the current position, if any."""
        if self._position >= len(self._words):
            return None
        return present_word(self._words[self._position], self._config.orp_rules)

    # ------------------------------------------------------------------
    # Pure word computations
    # ------------------------------------------------------------------

    def compute_recognition_index(self, word: str) -> int:
        return compute_recognition_index(word, self._config.orp_rules)

    def compute_delay(self, word: str) -> float:
        """Nominal on-screen time for ``word`` at the current rate, in ms."""
        return compute_delay(
            word,
            self._rate,
            self._config.pause_multiplier,
            self._config.pause_punctuation,
        )

    # ------------------------------------------------------------------
    # Text and rate
    # ------------------------------------------------------------------

    def load_text(self, raw: str) -> None:
        """Replace the word sequence and return to IDLE at position 0.

        Any pending transition is cancelled first. Emits word-changed for
        the first word (if there is one) and always emits progress.
        """
        self._cancel_pending()
        self._words = tuple(tokenize(raw))
        self._position = 0
        self._drift_ms = 0.0
        self._state = PlaybackState.IDLE
        logger.info("Loaded %d words", len(self._words))

        if self._words:
            self._emit_word()
        self._emit_progress()

    def set_rate(self, wpm: int) -> int:
        """Clamp and store a new rate; returns the stored value."""
        self._rate = max(self._config.min_wpm, min(self._config.max_wpm, int(wpm)))
        logger.debug("Rate set to %d WPM", self._rate)
        return self._rate

    def adjust_rate(self, delta: int) -> int:
        """Add ``delta`` WPM to the current rate, clamped."""
        return self.set_rate(self._rate + delta)

    def step_rate(self, steps: int = 1) -> int:
        """Move the rate by ``steps`` configured WPM steps (negative slows down)."""
        return self.adjust_rate(steps * self._config.wpm_step)

    # ------------------------------------------------------------------
    # Playback control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin or resume playback. No-op with no text or while playing.

        Raises:
            RuntimeError: With the default AsyncioScheduler, if no event
                          loop is running.
        """
        if not self._words or self._state is PlaybackState.PLAYING:
            return

        replay = self._position >= len(self._words)
        if replay:
            self._position = 0

        self._state = PlaybackState.PLAYING
        if replay:
            self._emit_progress()
        self._drift_ms = 0.0
        logger.debug("Playback started at word %d/%d", self._position, len(self._words))
        self._emit_word()
        self._schedule_next(0.0)

    def pause(self) -> None:
        """Stop advancing, keeping the current word and position."""
        if self._state is not PlaybackState.PLAYING:
            return
        self._cancel_pending()
        self._state = PlaybackState.PAUSED
        logger.debug("Playback paused at word %d/%d", self._position, len(self._words))

    def toggle(self) -> bool:
        """Pause if playing, start otherwise. Returns whether now playing."""
        if self._state is PlaybackState.PLAYING:
            self.pause()
        else:
            self.start()
        return self.is_playing

    def reset(self) -> None:
        """Stop and rewind to the first word."""
        self.pause()
        self._position = 0
        self._drift_ms = 0.0
        if self._state is not PlaybackState.IDLE:
            self._state = PlaybackState.PAUSED
        logger.debug("Playback reset")

        if self._words:
            self._emit_word()
        self._emit_progress()

    # ------------------------------------------------------------------
    # Advance loop
    # ------------------------------------------------------------------

    def _schedule_next(self, drift_ms: float) -> None:
        # A listener may have paused or reloaded during the last emission.
        if self._state is not PlaybackState.PLAYING:
            return

        nominal = self.compute_delay(self._words[self._position])
        delay = corrected_delay(nominal, drift_ms)
        self._generation += 1
        scheduled_at = self._scheduler.now()
        self._pending = self._scheduler.call_later(
            delay,
            functools.partial(self._on_transition, self._generation, scheduled_at, delay),
        )

    def _on_transition(
        self,
        generation: int,
        scheduled_at: float,
        delay: float,
    ) -> None:
        # Stale firings (cancelled or superseded) are ignored.
        if generation != self._generation or self._state is not PlaybackState.PLAYING:
            return
        self._pending = None

        elapsed = self._scheduler.now() - scheduled_at
        drift = elapsed - delay
        self._drift_ms = drift

        self._position += 1
        logger.debug(
            "Advanced to word %d/%d (drift %.2f ms)",
            self._position,
            len(self._words),
            drift,
        )
        # pause/reset/load/start from a listener all bump the generation;
        # whoever bumped it now owns the schedule.
        self._emit_progress()
        if generation != self._generation:
            return

        if self._position >= len(self._words):
            self._state = PlaybackState.COMPLETED
            logger.info("Playback completed (%d words)", len(self._words))
            self._on_complete()
            return

        self._emit_word()
        if generation != self._generation:
            return
        self._schedule_next(drift)

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _emit_word(self) -> None:
        presentation = self.current_word()
        if presentation is not None:
            self._on_word(presentation)

    def _emit_progress(self) -> None:
        self._on_progress(self.get_progress())
