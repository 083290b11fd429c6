"""Git object store access for reading and writing commits."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from git_rescribe.exceptions import ObjectStoreError
from git_rescribe.models import CommitInfo, Signature

logger = logging.getLogger(__name__)

# hash, author name/email/date, committer name/email/date, tree, parents, body
_COMMIT_FORMAT = "%x00".join(["%H", "%an", "%ae", "%aI", "%cn", "%ce", "%cI", "%T", "%P", "%B"])


def _describe(error: GitCommandError) -> str:
    """Extract git's own error text from a GitCommandError."""
    stderr = (error.stderr or "").strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:") :].strip().strip("'").strip()
    return stderr or str(error)


class GitObjectStore:
    """Reads commit metadata from and writes commits into a git repository.

    All git failures surface as ObjectStoreError.
    """

    def __init__(self, repo: Repo):
        self.repo = repo

    @classmethod
    def open(cls, path: Path) -> "GitObjectStore":
        """Open the repository containing ``path``."""
        try:
            repo = Repo(Path(path), search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise ObjectStoreError(f"Not a git repository: {path}") from e
        return cls(repo)

    @property
    def git_dir(self) -> Path:
        return Path(self.repo.git_dir)

    @property
    def working_dir(self) -> Optional[Path]:
        return Path(self.repo.working_tree_dir) if self.repo.working_tree_dir else None

    def _git(self, command: str, *args: str, **kwargs) -> str:
        logger.debug("git %s %s", command.replace("_", "-"), " ".join(args))
        try:
            return getattr(self.repo.git, command)(*args, **kwargs)
        except GitCommandError as e:
            raise ObjectStoreError(
                f"git {command.replace('_', '-')} failed: {_describe(e)}"
            ) from e

    def get_commit_info(self, rev: str) -> CommitInfo:
        """Get full metadata for a commit."""
        output = self._git(
            "show", "-s", "--no-show-signature", f"--format={_COMMIT_FORMAT}", f"{rev}^{{commit}}"
        )
        fields = output.split("\x00", 9)
        if len(fields) != 10:
            raise ObjectStoreError(f"Unexpected commit metadata for {rev}")

        (
            full_hash,
            author_name,
            author_email,
            author_date,
            committer_name,
            committer_email,
            committer_date,
            tree,
            parents,
            message,
        ) = fields

        return CommitInfo(
            hash=full_hash,
            author_name=author_name,
            author_email=author_email,
            author_date=author_date,
            committer_name=committer_name,
            committer_email=committer_email,
            committer_date=committer_date,
            tree=tree,
            parents=parents.split(),
            message=message.rstrip("\n"),
        )

    def rev_parse(self, rev: str) -> str:
        """Resolve a revision to a full object hash."""
        return self._git("rev_parse", "--verify", rev).strip()

    def get_tree_hash(self, commit: str) -> str:
        """Get the tree hash of a commit."""
        return self.rev_parse(f"{commit}^{{tree}}")

    def create_commit(
        self,
        tree: str,
        parents: Sequence[str],
        author: Signature,
        committer: Signature,
        message: str,
    ) -> str:
        """Create a commit object with explicit metadata and return its hash.

        Dates are passed through verbatim, so identical inputs produce the
        same commit hash.
        """
        args = [tree]
        for parent in parents:
            args.extend(["-p", parent])
        args.extend(["-m", message])

        env = {
            "GIT_AUTHOR_NAME": author.name,
            "GIT_AUTHOR_EMAIL": author.email,
            "GIT_AUTHOR_DATE": author.date,
            "GIT_COMMITTER_NAME": committer.name,
            "GIT_COMMITTER_EMAIL": committer.email,
            "GIT_COMMITTER_DATE": committer.date,
        }
        return self._git("commit_tree", *args, env=env).strip()

    def resolve_ref(self, ref: str) -> bool:
        """Check whether ``ref`` names a commit. No side effects."""
        try:
            self.repo.git.rev_parse("--verify", "--quiet", f"{ref}^{{commit}}")
        except GitCommandError:
            return False
        return True

    def count_commits(self, rev_range: str = "HEAD") -> int:
        """Count the commits in a revision or range."""
        return int(self._git("rev_list", "--count", rev_range).strip() or 0)

    def list_commits(self, rev_range: str = "HEAD") -> List[str]:
        """Full hashes in ``rev_range``, topologically ordered, oldest first."""
        return self._git("rev_list", "--topo-order", "--reverse", rev_range).split()

    def get_current_branch(self) -> str:
        """Name of the checked out branch, or ``HEAD`` when detached."""
        return self._git("rev_parse", "--abbrev-ref", "HEAD").strip()

    def update_current_branch(self, commit: str) -> None:
        """Point the current branch at ``commit`` and reset the working tree.

        Discards uncommitted changes in the working tree.
        """
        branch = self.get_current_branch()
        if branch != "HEAD":
            self._git("update_ref", "-m", "rescribe: finish", f"refs/heads/{branch}", commit)
        else:
            logger.warning("HEAD is detached; moving HEAD without updating a branch")
        self._git("reset", "--hard", "--quiet", commit)

    def is_dirty(self) -> bool:
        """True if tracked files have uncommitted changes."""
        return self.repo.is_dirty(untracked_files=False)
