"""
ForestManager for promptvault.

Builds a user's nested forest from the flat rows in storage, and flattens it
back to rows on save.
"""
import logging
from typing import Dict, Optional, Union

from pydantic import ValidationError

from promptvault.exceptions import StorageError
from promptvault.managers.item_store import iter_items
from promptvault.managers.storage_manager import StorageManager
from promptvault.models.base import Folder, Forest, Item, Prompt
from promptvault.models.files import FolderRecord, PromptRecord, UserVaultFile

logger = logging.getLogger(__name__)

Record = Union[FolderRecord, PromptRecord]


def _to_item(record: Record) -> Item:
    if isinstance(record, FolderRecord):
        return Folder(
            id=record.id,
            name=record.name,
            parent_id=record.parent_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
    if record.version_number != 1 + len(record.history):
        logger.warning(
            "Prompt %s is at version %d but has %d archived versions",
            record.id, record.version_number, len(record.history),
        )
    return Prompt(
        id=record.id,
        name=record.name,
        content=record.content,
        parent_id=record.parent_id,
        created_at=record.created_at,
        updated_at=record.updated_at,
        version_number=record.version_number,
        is_favorite=record.is_favorite,
        history=sorted(record.history, key=lambda r: r.version_number, reverse=True),
    )


def _creates_cycle(records: Dict[str, Record], item_id: str, parent_id: str) -> bool:
    seen = set()
    current: Optional[str] = parent_id
    while current is not None and current not in seen:
        if current == item_id:
            return True
        seen.add(current)
        parent = records.get(current)
        current = parent.parent_id if parent else None
    return current is not None


def build_forest(vault: UserVaultFile) -> Forest:
    """Rebuild the nested forest from flat rows.

    Rows are placed in the stored pre-order, then any rows missing from it in
    file order. A row whose parent folder is missing (or that would close a
    cycle) is attached at top level.
    """
    records: Dict[str, Record] = {}
    for record in [*vault.folders, *vault.prompts]:
        records.setdefault(record.id, record)

    items: Dict[str, Item] = {rid: _to_item(r) for rid, r in records.items()}

    ordered = [rid for rid in vault.order if rid in records]
    listed = set(ordered)
    ordered += [rid for rid in records if rid not in listed]

    forest: Forest = []
    placed = set()
    for rid in ordered:
        if rid in placed:
            continue
        placed.add(rid)
        item = items[rid]
        parent_id = item.parent_id
        parent = items.get(parent_id) if parent_id else None

        if parent_id is None:
            forest.append(item)
        elif isinstance(parent, Folder) and not _creates_cycle(records, rid, parent_id):
            parent.children.append(item)
        else:
            logger.warning(
                "Item %s references unusable parent %s; placing it at top level",
                rid, parent_id,
            )
            item.parent_id = None
            forest.append(item)

    return forest


def flatten_forest(forest: Forest, user_id: str) -> UserVaultFile:
    """Flatten a forest into per-user rows in pre-order."""
    vault = UserVaultFile(user_id=user_id)
    for item in iter_items(forest):
        vault.order.append(item.id)
        if isinstance(item, Folder):
            vault.folders.append(
                FolderRecord(
                    id=item.id,
                    user_id=user_id,
                    name=item.name,
                    parent_id=item.parent_id,
                    created_at=item.created_at,
                    updated_at=item.updated_at,
                )
            )
        else:
            vault.prompts.append(
                PromptRecord(
                    id=item.id,
                    user_id=user_id,
                    name=item.name,
                    content=item.content,
                    parent_id=item.parent_id,
                    created_at=item.created_at,
                    updated_at=item.updated_at,
                    version_number=item.version_number,
                    is_favorite=item.is_favorite,
                    history=list(item.history),
                )
            )
    return vault


class ForestManager:
    """
    Manages the lifecycle of a user's forest.

    Usage:
        storage = StorageManager()
        forest_mgr = ForestManager(storage)

        forest = forest_mgr.load("alice")
        # ... apply item store operations ...
        forest_mgr.save("alice", forest)
    """

    def __init__(self, storage: StorageManager) -> None:
        self.storage = storage

    def load(self, user_id: str) -> Forest:
        """Load and rebuild the forest for user_id.

        Raises:
            StorageError: If the file is unreadable or a row is not a valid item.
        """
        vault = self.storage.load_user_vault(user_id)
        try:
            return build_forest(vault)
        except ValidationError as e:
            raise StorageError(f"Failed to load vault for user '{user_id}': {e}")

    def save(self, user_id: str, forest: Forest) -> None:
        """Flatten and store the forest for user_id."""
        self.storage.save_user_vault(flatten_forest(forest, user_id))

    def count(self, forest: Forest) -> Dict[str, int]:
        """Count folders and prompts in a forest."""
        counts = {"folders": 0, "prompts": 0}
        for item in iter_items(forest):
            counts["folders" if isinstance(item, Folder) else "prompts"] += 1
        return counts
