"""
File models for promptvault.

Models representing the structure of JSON files in the .promptvault/ directory.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from promptvault.constants import (
    DEFAULT_BRANCH_SUFFIX,
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_LABEL_SEPARATOR,
    DEFAULT_ROOT_OPTION_LABEL,
    EXPORT_FORMATS,
    INITIAL_VERSION_NUMBER,
    SCHEMA_VERSION,
)

from .base import VersionRecord


class FolderRecord(BaseModel):
    """Flat folder row, joined to its parent by parent_id."""

    id: str
    user_id: str
    name: str
    parent_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PromptRecord(BaseModel):
    """Flat prompt row with its archived versions embedded."""

    id: str
    user_id: str
    name: str
    content: str
    parent_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    version_number: int = INITIAL_VERSION_NUMBER
    is_favorite: bool = False
    history: List[VersionRecord] = Field(default_factory=list)


class UserVaultFile(BaseModel):
    """Model for users/<user_id>.json.

    Rows are stored in pre-order so sibling order survives a round trip.
    """

    schema_version: str = SCHEMA_VERSION
    user_id: str = ""
    folders: List[FolderRecord] = Field(default_factory=list)
    prompts: List[PromptRecord] = Field(default_factory=list)
    # Pre-order ids of every item, folders and prompts interleaved
    order: List[str] = Field(default_factory=list)


class ConfigFile(BaseModel):
    """Model for config.json file.

    Vault-wide settings.
    """

    schema_version: str = SCHEMA_VERSION

    branch_suffix: str = DEFAULT_BRANCH_SUFFIX
    label_separator: str = DEFAULT_LABEL_SEPARATOR
    root_option_label: str = DEFAULT_ROOT_OPTION_LABEL
    default_export_format: str = DEFAULT_EXPORT_FORMAT

    @field_validator("default_export_format")
    @classmethod
    def validate_export_format(cls, v: str) -> str:
        if v not in EXPORT_FORMATS:
            raise ValueError(f"Export format must be one of: {', '.join(EXPORT_FORMATS)}.")
        return v
