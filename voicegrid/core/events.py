#!/usr/bin/env python3
"""Centralized event types for the voice grid.

All event types are defined here to avoid ad-hoc string events
and ensure type safety across the codebase.
"""

from enum import Enum, auto

__all__ = ["EventType"]


class EventType(Enum):
    """All possible events in the system."""

    # Speech source lifecycle
    VOICE_LISTENING_START = auto()  # Source started delivering speech
    VOICE_LISTENING_STOP = auto()  # Source stopped (user stop, end of input, failure)

    # Speech source output
    VOICE_PARTIAL_TRANSCRIPT = auto()  # Interim text, display only
    VOICE_TRANSCRIPTION_READY = auto()  # Finalized utterance
    VOICE_ERROR = auto()  # Human-readable source error

    # Interpretation outcome
    VOICE_COMMAND_RECOGNIZED = auto()  # Utterance mapped to an action and applied
    VOICE_COMMAND_UNRECOGNIZED = auto()  # Non-empty utterance matched no rule
    CELL_NOT_FOUND = auto()  # Navigation target outside 1..24

    # Grid
    GRID_STATE_CHANGED = auto()

    # System events
    SHUTDOWN = auto()
