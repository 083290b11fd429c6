"""Build commit descriptors from existing history."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from pydantic import ValidationError

from git_rescribe.config import RescribeConfig
from git_rescribe.core.object_store import GitObjectStore
from git_rescribe.core.plan_file import format_plan
from git_rescribe.exceptions import PlanValidationError
from git_rescribe.models import (
    CommitDescriptor,
    CommitInfo,
    ContentSource,
    ParentRef,
    Signature,
)

logger = logging.getLogger(__name__)


def history_range(base: Optional[str]) -> str:
    """Revision range covered by a rescribe from ``base`` (``None`` = root)."""
    return "HEAD" if base is None else f"{base}..HEAD"


class HistoryExtractor:
    """Walks ``base..HEAD`` and describes each commit symbolically.

    Parents inside the walked range become ``previous`` (only for the
    first parent, and only when it is the commit emitted right before) or
    ``rewritten:<hash>``; parents outside the range stay bare hashes.
    """

    def __init__(self, store: GitObjectStore, config: Optional[RescribeConfig] = None):
        self.store = store
        self.config = config or RescribeConfig()

    def short(self, commit_hash: str) -> str:
        return commit_hash[: self.config.short_hash_length]

    def extract(self, base: Optional[str] = None) -> List[CommitDescriptor]:
        """Describe every commit in ``base..HEAD`` (all of HEAD if ``base`` is None), oldest first."""
        hashes = self.store.list_commits(history_range(base))
        logger.info("Reading %d commit%s", len(hashes), "" if len(hashes) == 1 else "s")

        positions = {commit_hash: i for i, commit_hash in enumerate(hashes)}

        # Metadata fetches are independent; map() keeps topological order
        workers = max(1, min(self.config.max_workers, len(hashes)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            infos = list(pool.map(self.store.get_commit_info, hashes))

        return [self._describe(info, i, positions) for i, info in enumerate(infos)]

    def render(self, base: Optional[str] = None) -> str:
        """Plan file text for ``base..HEAD``."""
        return format_plan(self.extract(base))

    def _describe(
        self, info: CommitInfo, index: int, positions: Dict[str, int]
    ) -> CommitDescriptor:
        parents = [
            self._parent_ref(parent, slot, index, positions)
            for slot, parent in enumerate(info.parents)
        ]
        try:
            return CommitDescriptor(
                author=Signature(identity=info.author_identity, date=info.author_date),
                committer=Signature(identity=info.committer_identity, date=info.committer_date),
                content=ContentSource.commit(self.short(info.hash)),
                message=info.message,
                parents=parents,
            )
        except ValidationError as e:
            raise PlanValidationError(
                [f"commit {self.short(info.hash)}: {error['msg']}" for error in e.errors()]
            ) from e

    def _parent_ref(
        self, parent: str, slot: int, index: int, positions: Dict[str, int]
    ) -> ParentRef:
        position = positions.get(parent)
        if position is None:
            return ParentRef.commit(self.short(parent))
        if slot == 0 and position == index - 1:
            return ParentRef.previous()
        return ParentRef.rewritten(self.short(parent))
