"""Shared helpers for git-rescribe tests."""

import hashlib
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from git import Repo

from git_rescribe.exceptions import ObjectStoreError
from git_rescribe.models import (
    CommitDescriptor,
    CommitInfo,
    ContentSource,
    ParentRef,
    Signature,
)

AUTHOR = "Test User <test@example.com>"
DATE = "2025-01-01T10:00:00+00:00"


def date(hour: int) -> str:
    return f"2025-01-01T{hour:02d}:00:00+00:00"


def commit_file(
    repo: Repo,
    name: str,
    content: str,
    message: str,
    when: str = DATE,
    author: str = AUTHOR,
) -> str:
    """Write a file and commit it with fixed dates; return the commit hash."""
    path = Path(repo.working_tree_dir) / name
    path.write_text(content)
    repo.git.add(name)
    author_name, author_email = author[:-1].split(" <")
    repo.git.commit(
        "-m",
        message,
        env={
            "GIT_AUTHOR_NAME": author_name,
            "GIT_AUTHOR_EMAIL": author_email,
            "GIT_AUTHOR_DATE": when,
            "GIT_COMMITTER_NAME": author_name,
            "GIT_COMMITTER_EMAIL": author_email,
            "GIT_COMMITTER_DATE": when,
        },
    )
    return repo.head.commit.hexsha


def merge_branch(repo: Repo, branch: str, message: str, when: str = DATE) -> str:
    """Create a non-fast-forward merge of ``branch`` into the current branch."""
    repo.git.merge(
        "--no-ff",
        "-m",
        message,
        branch,
        env={"GIT_AUTHOR_DATE": when, "GIT_COMMITTER_DATE": when},
    )
    return repo.head.commit.hexsha


def descriptor(
    content: str,
    parents: Sequence[str] = (),
    message: str = "message",
    identity: str = "A <a@x.com>",
    when: str = "2025-01-01T00:00:00Z",
) -> CommitDescriptor:
    return CommitDescriptor(
        author=Signature(identity=identity, date=when),
        committer=Signature(identity=identity, date=when),
        content=ContentSource.parse(content),
        message=message,
        parents=[ParentRef.parse(p) for p in parents],
    )


class FakeObjectStore:
    """In-memory stand-in for GitObjectStore."""

    def __init__(self, git_dir: Optional[Path] = None):
        self.git_dir = git_dir
        self.commits: Dict[str, CommitInfo] = {}
        self.created: List[str] = []
        self.branch_updates: List[str] = []
        self.fail_on_create: Optional[int] = None

    def add(
        self,
        commit_hash: str,
        tree: str,
        parents: Sequence[str] = (),
        message: str = "message",
        identity: str = "A <a@x.com>",
        when: str = "2025-01-01T00:00:00Z",
    ) -> CommitInfo:
        name, email = identity[:-1].split(" <")
        info = CommitInfo(
            hash=commit_hash,
            author_name=name,
            author_email=email,
            author_date=when,
            committer_name=name,
            committer_email=email,
            committer_date=when,
            tree=tree,
            parents=list(parents),
            message=message,
        )
        self.commits[commit_hash] = info
        return info

    def _find(self, rev: str) -> CommitInfo:
        for commit_hash, info in self.commits.items():
            if commit_hash.startswith(rev):
                return info
        raise ObjectStoreError(f"unknown revision {rev}")

    def get_commit_info(self, rev: str) -> CommitInfo:
        return self._find(rev)

    def get_tree_hash(self, commit: str) -> str:
        return self._find(commit).tree

    def create_commit(self, tree, parents, author, committer, message) -> str:
        if self.fail_on_create is not None and len(self.created) == self.fail_on_create:
            raise ObjectStoreError("commit-tree failed")
        payload = "\n".join([tree, *parents, author.identity, author.date, message])
        commit_hash = hashlib.sha1(payload.encode()).hexdigest()
        name, email = author.name, author.email
        self.commits[commit_hash] = CommitInfo(
            hash=commit_hash,
            author_name=name,
            author_email=email,
            author_date=author.date,
            committer_name=committer.name,
            committer_email=committer.email,
            committer_date=committer.date,
            tree=tree,
            parents=list(parents),
            message=message,
        )
        self.created.append(commit_hash)
        return commit_hash

    def update_current_branch(self, commit: str) -> None:
        self.branch_updates.append(commit)
