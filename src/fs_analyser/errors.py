from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fs_analyser.models.filesystem import TraversalState


class AnalyserError(Exception):
    """Base class for errors reported to the user with an ``ERROR:`` prefix."""


class InvalidInputError(AnalyserError):
    pass


class PathNotFoundError(AnalyserError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Path does not exist: {path}")
        self.path = path


class TraversalError(AnalyserError):
    """Raised when a walk aborts; ``state`` holds whatever was accumulated."""

    def __init__(self, message: str, *, path: str | None = None, state: TraversalState | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.state = state


class ScanCancelledError(TraversalError):
    pass
