"""Commit metadata as read from the object store."""

from typing import List

from pydantic import BaseModel

from .descriptor import format_identity


class CommitInfo(BaseModel):
    """Live metadata of an existing commit."""

    hash: str
    author_name: str
    author_email: str
    author_date: str
    committer_name: str
    committer_email: str
    committer_date: str
    tree: str
    parents: List[str]
    message: str

    model_config = {"frozen": True}

    @property
    def author_identity(self) -> str:
        return format_identity(self.author_name, self.author_email)

    @property
    def committer_identity(self) -> str:
        return format_identity(self.committer_name, self.committer_email)
