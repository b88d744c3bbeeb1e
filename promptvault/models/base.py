"""
Item models for promptvault.

A user's vault is a forest of Folder and Prompt items. Folders hold their
children in insertion order; prompts carry their current content, a version
counter and the archived history of superseded content.
"""

import uuid
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from promptvault.constants import (
    INITIAL_VERSION_NUMBER,
    VALIDATION_CONTENT_REQUIRED,
    VALIDATION_NAME_REQUIRED,
    VALIDATION_SELF_PARENT,
)


def new_id() -> str:
    """Generate a fresh item id."""
    return str(uuid.uuid4())


class VersionRecord(BaseModel):
    """Immutable snapshot of a prompt's superseded content.

    version_number is the number the content held before it was replaced.
    is_current is only set on the synthetic entry that list_versions
    builds from the prompt's live content.
    """

    model_config = ConfigDict(frozen=True)

    version_number: int = Field(ge=1)
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)
    is_current: bool = False


class BaseItem(BaseModel):
    """
    Base model for folders and prompts.

    Common fields:
    - id: Unique identifier, assigned at creation
    - name: Display name (non-empty)
    - parent_id: Containing folder id, None for top-level items
    - timestamps: created_at, updated_at
    """

    id: str = Field(default_factory=new_id)
    name: str
    parent_id: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names."""
        if not v or not v.strip():
            raise ValueError(VALIDATION_NAME_REQUIRED)
        return v


class Prompt(BaseItem):
    """Prompt model - versioned text.

    Invariant: version_number == 1 + len(history), history newest first.
    """

    type: Literal["prompt"] = "prompt"
    content: str
    version_number: int = Field(default=INITIAL_VERSION_NUMBER, ge=1)
    history: List[VersionRecord] = Field(default_factory=list)
    is_favorite: bool = False

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v:
            raise ValueError(VALIDATION_CONTENT_REQUIRED)
        return v


class Folder(BaseItem):
    """Folder model - ordered container of folders and prompts."""

    type: Literal["folder"] = "folder"
    children: List["Item"] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_not_self_parent(self) -> "Folder":
        if self.parent_id is not None and self.parent_id == self.id:
            raise ValueError(VALIDATION_SELF_PARENT)
        return self


Item = Annotated[Union[Folder, Prompt], Field(discriminator="type")]
Forest = List[Item]

Folder.model_rebuild()
