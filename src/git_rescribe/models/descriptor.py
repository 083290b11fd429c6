"""Commit descriptors: the editable unit of a rescribe plan file."""

import datetime
from typing import Annotated, Any, List, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from .refs import ContentSource, ParentRef

IDENTITY_PATTERN = r"^.+ <.+@.+>$"


def _parse_content(value: Any) -> Any:
    return ContentSource.parse(value) if isinstance(value, str) else value


def _parse_parent(value: Any) -> Any:
    return ParentRef.parse(value) if isinstance(value, str) else value


ContentField = Annotated[ContentSource, BeforeValidator(_parse_content)]
ParentField = Annotated[ParentRef, BeforeValidator(_parse_parent)]


def format_identity(name: str, email: str) -> str:
    """Format a name and email as ``Name <email>``."""
    return f"{name} <{email}>"


class Signature(BaseModel):
    """An identity plus the date it was recorded."""

    date: str = Field(min_length=1)
    identity: str = Field(pattern=IDENTITY_PATTERN)

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        # An unquoted ISO date in YAML is loaded as a datetime object
        if isinstance(value, datetime.date):
            return value.isoformat()
        return value

    @property
    def name(self) -> str:
        return self.identity.rsplit("<", 1)[0].strip()

    @property
    def email(self) -> str:
        return self.identity.rsplit("<", 1)[1].rstrip(">").strip()


class CommitDescriptor(BaseModel):
    """Declarative description of one commit in the target history."""

    author: Signature
    committer: Signature
    content: ContentField
    message: str
    parents: List[ParentField]

    model_config = {"extra": "forbid"}

    @field_validator("message")
    @classmethod
    def _trim_message(cls, value: str) -> str:
        return value.rstrip("\n")

    @model_validator(mode="after")
    def _check_previous_position(self) -> "CommitDescriptor":
        for position, parent in enumerate(self.parents):
            if parent.is_previous and position != 0:
                raise ValueError("'previous' may only be used as the first parent")
        return self

    @field_serializer("content")
    def _serialize_content(self, content: ContentSource) -> str:
        return str(content)

    @field_serializer("parents")
    def _serialize_parents(self, parents: List[ParentRef]) -> List[str]:
        return [str(p) for p in parents]

    @property
    def original_hash(self) -> Optional[str]:
        return self.content.original_hash

    @property
    def subject(self) -> str:
        """First line of the message."""
        return self.message.split("\n", 1)[0]


class RescribeFile(BaseModel):
    """The whole plan file: an ordered list of commit descriptors."""

    commits: List[CommitDescriptor]

    model_config = {"extra": "forbid"}
