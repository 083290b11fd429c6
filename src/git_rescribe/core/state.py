"""On-disk state of an in-progress rescribe."""

from pathlib import Path
from typing import Optional

from git_rescribe.config import RescribeConfig


class RescribeState:
    """The plan file and the original-branch marker inside the git directory.

    Presence of the plan file means a rescribe is in progress. There is no
    locking; callers check ``in_progress()`` before starting.
    """

    def __init__(self, git_dir: Path, config: Optional[RescribeConfig] = None):
        config = config or RescribeConfig()
        self.git_dir = Path(git_dir)
        self.todo_file = self.git_dir / config.todo_filename
        self.state_file = self.git_dir / config.state_filename

    def in_progress(self) -> bool:
        return self.todo_file.exists()

    def begin(self, plan_text: str, branch: str) -> None:
        """Write the plan file and remember the branch we started on."""
        self.todo_file.write_text(plan_text, encoding="utf-8")
        self.state_file.write_text(f"{branch}\n", encoding="utf-8")

    def original_branch(self) -> Optional[str]:
        """Branch that was checked out when the rescribe started."""
        if not self.state_file.exists():
            return None
        return self.state_file.read_text(encoding="utf-8").strip() or None

    def clear(self) -> bool:
        """Remove both state files. Returns True if anything was removed."""
        removed = False
        for path in (self.todo_file, self.state_file):
            if path.exists():
                path.unlink()
                removed = True
        return removed
