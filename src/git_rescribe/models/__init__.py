"""Data models for git-rescribe."""

from .commit_info import CommitInfo
from .descriptor import CommitDescriptor, RescribeFile, Signature, format_identity
from .plan import (
    Action,
    ChangeReason,
    CommitPlan,
    DeferredParent,
    RebasePlan,
    RescribeResult,
    ResolvedParent,
)
from .refs import ContentSource, ContentStrategy, ParentKind, ParentRef, hashes_match

__all__ = [
    "Action",
    "ChangeReason",
    "CommitDescriptor",
    "CommitInfo",
    "CommitPlan",
    "ContentSource",
    "ContentStrategy",
    "DeferredParent",
    "ParentKind",
    "ParentRef",
    "RebasePlan",
    "RescribeFile",
    "RescribeResult",
    "ResolvedParent",
    "Signature",
    "format_identity",
    "hashes_match",
]
