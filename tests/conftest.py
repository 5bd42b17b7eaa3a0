"""Shared test fixtures for the rsvp_reader test suite.

WHY: Most engine tests need the same three things: a virtual clock, an
engine wired to it, and a recorder that captures every callback in order.
Centralizing them keeps each test focused on the behaviour it checks.

HOW: ``EventRecorder`` appends ("word" | "progress" | "complete", payload)
tuples. ``make_engine`` builds a PlaybackEngine on a SimulatedScheduler
with an explicit config, so tests never depend on the environment.

RULES:
- Configs are explicit: 300 WPM default, [200, 1000] bounds, 25 WPM step,
  1.5x pause on ". ! ? ;", and the five-rule ORP table
- Each test gets fresh scheduler/recorder instances
"""

from __future__ import annotations

import math
from typing import Any

import pytest

from rsvp_reader.config import EngineConfig, OrpRule
from rsvp_reader.core.engine import PlaybackEngine
from rsvp_reader.scheduling.simulated import SimulatedScheduler

STANDARD_RULES = (
    OrpRule(max_length=1, index=0),
    OrpRule(max_length=5, index=1),
    OrpRule(max_length=9, index=2),
    OrpRule(max_length=13, index=3),
    OrpRule(max_length=math.inf, index=4),
)


def standard_config(**overrides: Any) -> EngineConfig:
    values = dict(
        default_wpm=300,
        min_wpm=200,
        max_wpm=1000,
        wpm_step=25,
        pause_multiplier=1.5,
        pause_punctuation=frozenset(".!?;"),
        orp_rules=STANDARD_RULES,
    )
    values.update(overrides)
    return EngineConfig(**values)


class EventRecorder:
    """Collects engine callbacks in the order they fire."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def on_word(self, presentation) -> None:
        self.events.append(("word", presentation))

    def on_progress(self, percent: float) -> None:
        self.events.append(("progress", percent))

    def on_complete(self) -> None:
        self.events.append(("complete", None))

    def of_kind(self, kind: str) -> list[Any]:
        return [payload for name, payload in self.events if name == kind]

    @property
    def words(self) -> list[str]:
        return [p.word for p in self.of_kind("word")]

    @property
    def progress(self) -> list[float]:
        return self.of_kind("progress")

    @property
    def completions(self) -> int:
        return len(self.of_kind("complete"))

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def config() -> EngineConfig:
    return standard_config()


@pytest.fixture
def scheduler() -> SimulatedScheduler:
    return SimulatedScheduler()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def make_engine(recorder, scheduler, config):
    """Factory for engines wired to the shared recorder and virtual clock."""

    def _make(
        scheduler_override: SimulatedScheduler | None = None,
        config_override: EngineConfig | None = None,
    ) -> PlaybackEngine:
        return PlaybackEngine(
            recorder.on_word,
            recorder.on_progress,
            recorder.on_complete,
            scheduler=scheduler_override or scheduler,
            config=config_override or config,
        )

    return _make


@pytest.fixture
def engine(make_engine) -> PlaybackEngine:
    return make_engine()
