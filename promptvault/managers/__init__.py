"""
Managers for promptvault.

This package contains focused modules that handle specific aspects of the vault:
- version_ledger: Archive-or-not decisions for prompt content edits
- item_store: Pure structural operations over the folder/prompt forest
- ForestManager: Build the nested forest from flat storage and back
- StorageManager: Persistence to the .promptvault/ folder structure
- transfer: JSON/CSV import and export
- EventBus: Announces committed vault changes to listeners
"""

from promptvault.managers.storage_manager import StorageManager
from promptvault.managers.forest_manager import ForestManager
from promptvault.managers.events import (
    EventBus,
    EventListener,
    EventType,
    LoggingListener,
    VaultEvent,
    get_event_bus,
)

__all__ = [
    "StorageManager",
    "ForestManager",
    "EventBus",
    "EventListener",
    "EventType",
    "LoggingListener",
    "VaultEvent",
    "get_event_bus",
]
