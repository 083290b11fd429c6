"""Execute a rebase plan against the object store."""

import logging
from typing import Dict, List, Optional, Sequence

from git_rescribe.config import RescribeConfig
from git_rescribe.core.object_store import GitObjectStore
from git_rescribe.exceptions import PlanReferenceError
from git_rescribe.models import (
    CommitPlan,
    DeferredParent,
    RebasePlan,
    RescribeResult,
    ResolvedParent,
)

logger = logging.getLogger(__name__)


class Executor:
    """Materializes a RebasePlan in entry order.

    Reused entries keep their original hash, created entries become new
    commit objects. The current branch is only moved once every entry has
    succeeded, so a failure part way leaves the visible history untouched
    (commits already created remain as unreferenced objects).
    """

    def __init__(self, store: GitObjectStore, config: Optional[RescribeConfig] = None):
        self.store = store
        self.config = config or RescribeConfig()

    def execute(self, plan: RebasePlan, update_head: Optional[bool] = None) -> RescribeResult:
        """Create the planned commits and optionally move the current branch.

        Raises:
            ObjectStoreError: creating a commit or moving the branch failed.
        """
        if update_head is None:
            update_head = self.config.update_head

        total = len(plan.commits)
        logger.info("Processing %d commit%s...", total, "" if total == 1 else "s")

        outcomes: List[str] = []
        replacements: Dict[str, str] = {}
        created: List[str] = []
        final_commit: Optional[str] = None

        for index, entry in enumerate(plan.commits):
            parents = self.resolve_parents(entry.parents, outcomes)
            logger.debug(
                "[%d/%d] tree %s, parents %s",
                index + 1,
                total,
                entry.tree,
                ", ".join(parents) if parents else "(root commit)",
            )

            if entry.is_reuse:
                new_hash = entry.original_hash
                logger.info("[%d/%d] Reused %s  %s", index + 1, total, new_hash, entry.descriptor.subject)
            else:
                new_hash = self._create(entry, parents)
                created.append(new_hash)
                logger.info(
                    "[%d/%d] Created %s  %s",
                    index + 1,
                    total,
                    new_hash[: self.config.short_hash_length],
                    entry.descriptor.subject,
                )

            if entry.original_hash:
                replacements[entry.original_hash] = new_hash
            outcomes.append(new_hash)
            final_commit = new_hash

        branch_updated = False
        if final_commit and update_head:
            logger.info("Updating HEAD to %s", final_commit)
            self.store.update_current_branch(final_commit)
            branch_updated = True

        return RescribeResult(
            final_commit=final_commit,
            replacements=replacements,
            created=created,
            branch_updated=branch_updated,
        )

    @staticmethod
    def resolve_parents(parents: Sequence[ResolvedParent], outcomes: Sequence[str]) -> List[str]:
        """Replace deferred parents with the hash their entry produced."""
        resolved = []
        for parent in parents:
            if isinstance(parent, DeferredParent):
                if parent.index >= len(outcomes):
                    raise PlanReferenceError(
                        f"Parent refers to commit #{parent.index + 1}, which is not processed yet"
                    )
                resolved.append(outcomes[parent.index])
            else:
                resolved.append(parent)
        return resolved

    def _create(self, entry: CommitPlan, parents: Sequence[str]) -> str:
        descriptor = entry.descriptor
        return self.store.create_commit(
            tree=entry.tree,
            parents=parents,
            author=descriptor.author,
            committer=descriptor.committer,
            message=descriptor.message,
        )
