"""Exceptions raised by git-rescribe."""

from typing import List, Optional


class RescribeError(Exception):
    """Base class for all user-facing rescribe failures."""


class PlanValidationError(RescribeError):
    """The plan file does not conform to the descriptor schema."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid rescribe plan:\n" + "\n".join(self.errors))


class PlanReferenceError(RescribeError):
    """A `previous` or `rewritten:` parent reference cannot be resolved."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"Commit #{index + 1}: {message}"
        super().__init__(message)


class ObjectStoreError(RescribeError):
    """A git object-store operation failed."""


class StateError(RescribeError):
    """Rescribe state on disk does not allow the requested operation."""


class InvalidBaseError(RescribeError):
    """The base revision does not resolve."""

    def __init__(self, base: str, total_commits: int):
        self.base = base
        self.total_commits = total_commits
        super().__init__(f"Invalid base '{base}'")


class EditorError(RescribeError):
    """The editor could not be run or exited unsuccessfully."""
