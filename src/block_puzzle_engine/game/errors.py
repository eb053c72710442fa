from __future__ import annotations


class EngineError(Exception):
    """Base class for errors reported by the game engine."""


class MoveValidationError(EngineError):
    """Bad piece index, empty hand slot, or an out-of-bounds/overlapping placement.

    Recoverable: the game state is left exactly as it was.
    """


class IllegalTransitionError(EngineError):
    """An operation was attempted on a game that has already ended."""


class StateCorruptionError(EngineError):
    """A persisted snapshot is structurally invalid and cannot be rehydrated.

    Fatal for the request: the engine never tries to repair its input.
    """
