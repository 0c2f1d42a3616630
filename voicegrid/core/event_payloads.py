"""Typed event payload definitions."""

from typing import Any, TypedDict


class TranscriptPayload(TypedDict):
    """Payload for partial and finalized transcript events."""

    transcript: str


class VoiceErrorPayload(TypedDict):
    """Payload for speech source errors."""

    error: str
    message: str


class CommandRecognizedPayload(TypedDict):
    """Payload for an applied voice command."""

    transcript: str
    action: dict[str, Any]


class CommandUnrecognizedPayload(TypedDict):
    """Payload for an utterance that matched no rule."""

    transcript: str
    message: str


class CellNotFoundPayload(TypedDict):
    """Payload for an out-of-range cell request."""

    transcript: str
    requested: int
    message: str


class GridStateChangedPayload(TypedDict):
    """Payload for grid state changes."""

    active_cell_index: int
    focused_sub_index: int | None
    selected_sub_indices: list[int]
    on_count: int


__all__ = [
    "TranscriptPayload",
    "VoiceErrorPayload",
    "CommandRecognizedPayload",
    "CommandUnrecognizedPayload",
    "CellNotFoundPayload",
    "GridStateChangedPayload",
]
