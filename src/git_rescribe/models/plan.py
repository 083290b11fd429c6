"""Rebase plan models produced by the planner and consumed by the executor."""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, model_validator

from .descriptor import CommitDescriptor


class Action(str, Enum):
    """What the executor does with a plan entry."""

    REUSE = "reuse"
    CREATE = "create"


class ChangeReason(str, Enum):
    """An attribute that differs from the original commit."""

    CONTENT = "content"
    PARENTS = "parents"
    AUTHOR_IDENTITY = "author identity"
    AUTHOR_DATE = "author date"
    COMMITTER_IDENTITY = "committer identity"
    COMMITTER_DATE = "committer date"
    MESSAGE = "message"
    NEW_COMMIT = "new commit"


class DeferredParent(BaseModel):
    """A parent whose hash is the outcome of an earlier plan entry.

    Only known once the executor has processed entry ``index``.
    """

    index: int

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"<pending #{self.index + 1}>"


ResolvedParent = Union[str, DeferredParent]


class CommitPlan(BaseModel):
    """The planner's decision for a single descriptor."""

    descriptor: CommitDescriptor
    original_hash: Optional[str] = None
    action: Action
    changes: List[ChangeReason] = []
    tree: str
    parents: List[ResolvedParent] = []

    @model_validator(mode="after")
    def _check_action(self) -> "CommitPlan":
        can_reuse = not self.changes and self.original_hash is not None
        if (self.action is Action.REUSE) != can_reuse:
            raise ValueError(
                "action must be 'reuse' exactly when an original exists and nothing changed"
            )
        return self

    @property
    def is_reuse(self) -> bool:
        return self.action is Action.REUSE


class RebasePlan(BaseModel):
    """Ordered plan entries plus the planned replacement of each original."""

    commits: List[CommitPlan] = []
    replacements: Dict[str, ResolvedParent] = {}

    def __len__(self) -> int:
        return len(self.commits)

    @property
    def reused(self) -> List[CommitPlan]:
        return [c for c in self.commits if c.is_reuse]

    @property
    def to_create(self) -> List[CommitPlan]:
        return [c for c in self.commits if not c.is_reuse]


class RescribeResult(BaseModel):
    """Outcome of executing a rebase plan."""

    final_commit: Optional[str] = None
    replacements: Dict[str, str] = {}
    created: List[str] = []
    branch_updated: bool = False

    @property
    def rewritten(self) -> Dict[str, str]:
        """Originals whose replacement is a different commit."""
        return {old: new for old, new in self.replacements.items() if old != new}
