"""
Data models for promptvault.

Import models explicitly from their modules:
    from promptvault.models.base import Folder, Prompt, VersionRecord
    from promptvault.models.files import UserVaultFile, ConfigFile
"""

from .base import BaseItem, Folder, Forest, Item, Prompt, VersionRecord, new_id

__all__ = [
    "BaseItem",
    "Folder",
    "Forest",
    "Item",
    "Prompt",
    "VersionRecord",
    "new_id",
]
