"""Core tokenization, ORP, timing, and playback modules.

WHY: The core package holds everything the playback engine needs and
nothing a presentation layer owns. It has no rendering, storage, or I/O
dependencies.

HOW: tokenizer.py splits text into words, orp.py picks each word's
recognition letter, timing.py turns a rate into per-word delays, and
engine.py ties them together into the playback state machine.

RULES:
- Everything except engine.py is a pure function of its inputs
- The engine talks to time only through a Scheduler
"""
