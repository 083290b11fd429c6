"""Tagged references used in plan files: content sources and parents."""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, model_validator

HASH_PATTERN = r"[0-9a-f]{7,40}"

_CONTENT_RE = re.compile(rf"^(tree|diff|commit):({HASH_PATTERN})$")
_REWRITTEN_RE = re.compile(rf"^rewritten:({HASH_PATTERN})$")
_HASH_RE = re.compile(rf"^{HASH_PATTERN}$")

PREVIOUS = "previous"
REWRITTEN_PREFIX = "rewritten:"


class ContentStrategy(str, Enum):
    """Where a commit's content tree comes from."""

    TREE = "tree"
    COMMIT = "commit"
    # Reserved for diff-based content; currently resolves like COMMIT.
    DIFF = "diff"


class ContentSource(BaseModel):
    """A parsed `<strategy>:<hash>` content reference."""

    strategy: ContentStrategy
    hash: str

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, value: str) -> "ContentSource":
        match = _CONTENT_RE.match(value)
        if not match:
            raise ValueError(
                f"content must be tree:<hash>, diff:<hash>, or commit:<hash>, got {value!r}"
            )
        return cls(strategy=ContentStrategy(match.group(1)), hash=match.group(2))

    @classmethod
    def commit(cls, hash: str) -> "ContentSource":
        return cls(strategy=ContentStrategy.COMMIT, hash=hash)

    @classmethod
    def tree(cls, hash: str) -> "ContentSource":
        return cls(strategy=ContentStrategy.TREE, hash=hash)

    @property
    def original_hash(self) -> Optional[str]:
        """Commit this content was derived from, if any."""
        if self.strategy is ContentStrategy.TREE:
            return None
        return self.hash

    def __str__(self) -> str:
        return f"{self.strategy.value}:{self.hash}"


class ParentKind(str, Enum):
    """How a parent reference is resolved."""

    PREVIOUS = "previous"
    REWRITTEN = "rewritten"
    COMMIT = "commit"


class ParentRef(BaseModel):
    """A parsed parent reference.

    ``previous`` names the entry right before this one in the plan,
    ``rewritten:<hash>`` names whatever replaces original commit ``<hash>``,
    and a bare hash names an existing commit outside the plan.
    """

    kind: ParentKind
    hash: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_hash(self) -> "ParentRef":
        if self.kind is ParentKind.PREVIOUS:
            if self.hash is not None:
                raise ValueError("a 'previous' parent takes no hash")
        elif self.hash is None or not _HASH_RE.match(self.hash):
            raise ValueError(f"a '{self.kind.value}' parent needs a hex commit hash")
        return self

    @classmethod
    def parse(cls, value: str) -> "ParentRef":
        if value == PREVIOUS:
            return cls.previous()
        match = _REWRITTEN_RE.match(value)
        if match:
            return cls.rewritten(match.group(1))
        if _HASH_RE.match(value):
            return cls.commit(value)
        raise ValueError(
            f"parent must be 'previous', 'rewritten:<hash>', or a commit hash, got {value!r}"
        )

    @classmethod
    def previous(cls) -> "ParentRef":
        return cls(kind=ParentKind.PREVIOUS)

    @classmethod
    def rewritten(cls, hash: str) -> "ParentRef":
        return cls(kind=ParentKind.REWRITTEN, hash=hash)

    @classmethod
    def commit(cls, hash: str) -> "ParentRef":
        return cls(kind=ParentKind.COMMIT, hash=hash)

    @property
    def is_previous(self) -> bool:
        return self.kind is ParentKind.PREVIOUS

    def __str__(self) -> str:
        if self.kind is ParentKind.PREVIOUS:
            return PREVIOUS
        if self.kind is ParentKind.REWRITTEN:
            return f"{REWRITTEN_PREFIX}{self.hash}"
        return self.hash


def hashes_match(a: str, b: str) -> bool:
    """True if one hash is a prefix of the other (short vs full hashes)."""
    return a.startswith(b) or b.startswith(a)
