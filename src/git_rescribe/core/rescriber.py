"""Start, continue and abort rescribe operations."""

import logging
from pathlib import Path
from typing import Any, Callable, List, NamedTuple, Optional

from git_rescribe.config import RescribeConfig
from git_rescribe.core.editor import open_editor
from git_rescribe.core.executor import Executor
from git_rescribe.core.extractor import HistoryExtractor, history_range
from git_rescribe.core.object_store import GitObjectStore
from git_rescribe.core.planner import Planner
from git_rescribe.core.state import RescribeState
from git_rescribe.exceptions import InvalidBaseError, RescribeError, StateError
from git_rescribe.models import RebasePlan, RescribeResult

logger = logging.getLogger(__name__)

PlanCallback = Callable[[RebasePlan], None]
ConfirmCallback = Callable[[RebasePlan], bool]
EditorCallback = Callable[[Path, str], None]


class PlanRow(NamedTuple):
    """One line of a plan preview."""

    status: str
    subject: str
    changes: List[str]


def truncate(text: str, max_length: int) -> str:
    """Shorten ``text`` to ``max_length`` characters, ending with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def describe_plan(plan: RebasePlan, width: int = 60) -> List[PlanRow]:
    """Rows summarizing what a plan will do to each commit."""
    rows = []
    for entry in plan.commits:
        status = "Reuse" if entry.is_reuse else "Modify"
        changes = [] if entry.is_reuse else [change.value for change in entry.changes]
        rows.append(PlanRow(status, truncate(entry.descriptor.subject, width), changes))
    return rows


class Rescriber:
    """Drives a rescribe from history extraction to branch update.

    ``preview`` is shown every plan before it is applied and ``confirm``
    decides whether to apply it (skipped with ``config.skip_confirmation``).
    """

    def __init__(
        self,
        store: GitObjectStore,
        config: Optional[RescribeConfig] = None,
        preview: Optional[PlanCallback] = None,
        confirm: Optional[ConfirmCallback] = None,
        editor: EditorCallback = open_editor,
    ):
        self.store = store
        self.config = config or RescribeConfig()
        self.preview = preview
        self.confirm = confirm
        self.editor = editor
        self.state = RescribeState(store.git_dir, self.config)
        self.extractor = HistoryExtractor(store, self.config)
        self.planner = Planner(store, self.config)
        self.executor = Executor(store, self.config)

    @classmethod
    def open(
        cls,
        path: Path,
        preview: Optional[PlanCallback] = None,
        confirm: Optional[ConfirmCallback] = None,
        **overrides: Any,
    ) -> "Rescriber":
        """Open the repository at ``path`` with config loaded from it."""
        store = GitObjectStore.open(path)
        config = RescribeConfig.load(store.repo, **overrides)
        return cls(store, config, preview=preview, confirm=confirm)

    def count_commits(self, base: Optional[str]) -> int:
        """Number of commits a rescribe from ``base`` covers.

        Raises:
            InvalidBaseError: ``base`` does not name a commit.
        """
        if base is None:
            return self.store.count_commits("HEAD")
        if not self.store.resolve_ref(base):
            raise InvalidBaseError(base, self.store.count_commits("HEAD"))
        return self.store.count_commits(history_range(base))

    def start(self, base: Optional[str]) -> Optional[RescribeResult]:
        """Begin a rescribe of ``base..HEAD`` (everything when ``base`` is None)."""
        if self.state.in_progress():
            raise StateError("Rescribe already in progress. Use --continue or --abort")
        if self.store.is_dirty():
            raise StateError("Working tree has uncommitted changes. Commit or stash them first")

        count = self.count_commits(base)
        if count == 0:
            raise RescribeError(f"Nothing to rescribe: no commits between {base} and HEAD")

        logger.info("Starting rescribe from %s...", base or "the root commit")
        logger.info("This will process %d commit%s.", count, "" if count == 1 else "s")

        plan_text = self.extractor.render(base)
        self.state.begin(plan_text, self.store.get_current_branch())

        if self.config.edit:
            logger.info("Opening editor...")
            self.editor(self.state.todo_file, self.config.editor)
            logger.info("Editor closed. Applying changes...")

        return self.resume()

    def resume(self) -> Optional[RescribeResult]:
        """Plan and apply the in-progress plan file.

        Returns None without touching the repository when the plan is not
        confirmed; the plan file is kept so it can be continued later.
        """
        if not self.state.in_progress():
            raise StateError("No rescribe in progress. Did you run 'git-rescribe <base>' first?")
        if self.store.is_dirty():
            raise StateError("Working tree has uncommitted changes. Commit or stash them first")

        plan = self.planner.plan_file(self.state.todo_file)

        if self.preview:
            self.preview(plan)
        if not self.config.skip_confirmation and self.confirm and not self.confirm(plan):
            logger.info("Plan not applied; it is kept for --continue or --abort")
            return None

        result = self.executor.execute(plan)
        self.state.clear()
        return result

    def abort(self) -> bool:
        """Discard the in-progress plan. Returns True if there was one."""
        branch = self.state.original_branch()
        removed = self.state.clear()
        if removed and branch:
            logger.info("Rescribe of %s aborted; the branch was not modified", branch)
        return removed
