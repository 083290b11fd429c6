"""Plan a rescribe: decide what to reuse and what to recreate."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from git_rescribe.config import RescribeConfig
from git_rescribe.core.object_store import GitObjectStore
from git_rescribe.core.plan_file import load_plan
from git_rescribe.exceptions import PlanReferenceError
from git_rescribe.models import (
    Action,
    ChangeReason,
    CommitDescriptor,
    CommitInfo,
    CommitPlan,
    ContentSource,
    ContentStrategy,
    DeferredParent,
    ParentKind,
    ParentRef,
    RebasePlan,
    ResolvedParent,
    hashes_match,
)

logger = logging.getLogger(__name__)


class Planner:
    """Turns commit descriptors into a RebasePlan.

    Planning only reads from the object store. Entries are resolved in file
    order while carrying a cursor (the outcome of the previous entry) and a
    mapping from each original commit to its planned replacement. An entry
    whose content, parents, identities, dates and message all match its
    original commit is reused as is; everything else is recreated.
    """

    def __init__(self, store: GitObjectStore, config: Optional[RescribeConfig] = None):
        self.store = store
        self.config = config or RescribeConfig()

    def plan_file(self, path: Path) -> RebasePlan:
        """Validate and plan a plan file."""
        return self.plan(load_plan(path))

    def plan(self, descriptors: Sequence[CommitDescriptor]) -> RebasePlan:
        """Resolve descriptors into a RebasePlan.

        Raises:
            PlanReferenceError: a ``previous`` or ``rewritten:`` parent cannot
                be resolved.
            ObjectStoreError: a referenced commit does not exist.
        """
        commits: List[CommitPlan] = []
        replacements: Dict[str, ResolvedParent] = {}
        cursor: Optional[ResolvedParent] = None

        for index, descriptor in enumerate(descriptors):
            original_hash = descriptor.original_hash
            tree = self.resolve_content(descriptor.content)
            parents = self.resolve_parents(descriptor.parents, index, cursor, replacements)

            if original_hash:
                original = self.store.get_commit_info(original_hash)
                changes = self.detect_changes(descriptor, original, tree, parents)
            else:
                changes = [ChangeReason.NEW_COMMIT]

            if original_hash and not changes:
                action = Action.REUSE
                cursor = original_hash
            else:
                action = Action.CREATE
                cursor = DeferredParent(index=index)

            if original_hash:
                replacements[original_hash] = cursor

            logger.debug(
                "Planned #%d %s: %s (%s)",
                index + 1,
                descriptor.content,
                action.value,
                ", ".join(c.value for c in changes) or "unchanged",
            )
            commits.append(
                CommitPlan(
                    descriptor=descriptor,
                    original_hash=original_hash,
                    action=action,
                    changes=changes,
                    tree=tree,
                    parents=parents,
                )
            )

        return RebasePlan(commits=commits, replacements=replacements)

    def resolve_content(self, content: ContentSource) -> str:
        """Resolve a content source to a tree hash."""
        if content.strategy is ContentStrategy.TREE:
            return content.hash
        if content.strategy is ContentStrategy.DIFF:
            logger.warning(
                "diff:%s is not applied as a diff yet; using that commit's tree", content.hash
            )
        return self.store.get_tree_hash(content.hash)

    def resolve_parents(
        self,
        parents: Sequence[ParentRef],
        index: int,
        cursor: Optional[ResolvedParent],
        replacements: Dict[str, ResolvedParent],
    ) -> List[ResolvedParent]:
        """Resolve parent references to hashes or deferred entries."""
        resolved: List[ResolvedParent] = []
        for parent in parents:
            if parent.kind is ParentKind.PREVIOUS:
                if cursor is None:
                    raise PlanReferenceError("Cannot use 'previous' for the first commit", index)
                resolved.append(cursor)
            elif parent.kind is ParentKind.REWRITTEN:
                resolved.append(self._lookup_rewritten(parent.hash, index, replacements))
            else:
                resolved.append(parent.hash)
        return resolved

    @staticmethod
    def _lookup_rewritten(
        original: str, index: int, replacements: Dict[str, ResolvedParent]
    ) -> ResolvedParent:
        if original in replacements:
            return replacements[original]

        matches = [value for key, value in replacements.items() if hashes_match(key, original)]
        if len(matches) > 1:
            raise PlanReferenceError(f"rewritten:{original} is ambiguous", index)
        if not matches:
            raise PlanReferenceError(
                f"No rewritten commit found for {original}; it must appear earlier in the plan",
                index,
            )
        return matches[0]

    @staticmethod
    def detect_changes(
        descriptor: CommitDescriptor,
        original: CommitInfo,
        tree: str,
        parents: Sequence[ResolvedParent],
    ) -> List[ChangeReason]:
        """List the attributes where a descriptor differs from its original."""
        changes: List[ChangeReason] = []

        if original.tree != tree:
            changes.append(ChangeReason.CONTENT)

        same_parents = len(original.parents) == len(parents) and all(
            isinstance(planned, str) and actual.startswith(planned)
            for actual, planned in zip(original.parents, parents)
        )
        if not same_parents:
            changes.append(ChangeReason.PARENTS)

        if original.author_identity != descriptor.author.identity:
            changes.append(ChangeReason.AUTHOR_IDENTITY)
        if original.author_date != descriptor.author.date:
            changes.append(ChangeReason.AUTHOR_DATE)
        if original.committer_identity != descriptor.committer.identity:
            changes.append(ChangeReason.COMMITTER_IDENTITY)
        if original.committer_date != descriptor.committer.date:
            changes.append(ChangeReason.COMMITTER_DATE)
        if original.message.rstrip("\n") != descriptor.message.rstrip("\n"):
            changes.append(ChangeReason.MESSAGE)

        return changes
