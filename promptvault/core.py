"""
VaultCore - application logic for promptvault.

Loads one user's forest, applies a single item store operation per call,
saves the result before returning and publishes an event for listeners.
Mutations are serialized by the caller; two cores working on the same
vault file overwrite each other (last writer wins).
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from promptvault.constants import DEFAULT_USER_ID, ENV_USER_ID, ENV_VAULT_DIR, ROOT_ID
from promptvault.exceptions import (
    ImportFormatError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from promptvault.managers import (
    EventType,
    ForestManager,
    LoggingListener,
    StorageManager,
    VaultEvent,
    get_event_bus,
)
from promptvault.managers import item_store, transfer
from promptvault.managers.item_store import FolderOption
from promptvault.managers.transfer import ImportedPrompt
from promptvault.managers.version_ledger import list_versions
from promptvault.models.base import Folder, Forest, Item, Prompt, VersionRecord
from promptvault.suggestions import Suggester, normalize_suggestions

logger = logging.getLogger(__name__)


class VaultCore:
    """
    Core class for vault operations.

    Orchestrates:
    - StorageManager: Persistence to .promptvault/
    - ForestManager: Flat rows <-> nested forest
    - item_store / version_ledger: Pure forest transforms
    - EventBus: Event-driven communication
    """

    def __init__(
        self,
        vault_dir: Optional[Path] = None,
        user_id: Optional[str] = None,
    ):
        """
        Initialize VaultCore for one user.

        Args:
            vault_dir: Vault directory. Defaults to $PROMPTVAULT_DIR or .promptvault/.
            user_id: Owner of the forest. Defaults to $PROMPTVAULT_USER or 'local'.
        """
        if vault_dir is None and os.environ.get(ENV_VAULT_DIR):
            vault_dir = Path(os.environ[ENV_VAULT_DIR])
        self.user_id = user_id or os.environ.get(ENV_USER_ID) or DEFAULT_USER_ID

        self.storage = StorageManager(vault_dir)
        self.forest_manager = ForestManager(self.storage)
        self.config = self.storage.load_config()
        self.forest: Forest = self.forest_manager.load(self.user_id)

        self.event_bus = get_event_bus()
        self.event_bus.subscribe(LoggingListener())

    def _commit(self, forest: Forest) -> None:
        """Save forest to storage, then make it current."""
        self.forest_manager.save(self.user_id, forest)
        self.forest = forest

    def _publish(self, event_type: EventType, item: Item, **data) -> None:
        self.event_bus.publish(
            VaultEvent(
                type=event_type,
                user_id=self.user_id,
                item_id=item.id,
                item_type=item.type,
                item_name=item.name,
                parent_id=item.parent_id,
                data=data,
            )
        )

    @staticmethod
    def _check_name(name: Optional[str]) -> None:
        if not name or not name.strip():
            raise ValidationError("Name is required for all items.")

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_item(self, item_id: str) -> Item:
        """Get a folder or prompt by id."""
        item = item_store.find_item(self.forest, item_id)
        if item is None:
            raise NotFoundError(f"Item '{item_id}' not found.")
        return item

    def get_prompt(self, prompt_id: str) -> Prompt:
        item = self.get_item(prompt_id)
        if not isinstance(item, Prompt):
            raise InvalidStateError(f"Item '{prompt_id}' is a folder, not a prompt.")
        return item

    def get_folder(self, folder_id: str) -> Folder:
        item = self.get_item(folder_id)
        if not isinstance(item, Folder):
            raise InvalidStateError(f"Item '{folder_id}' is a prompt, not a folder.")
        return item

    def prompts(self) -> List[Prompt]:
        """All prompts, most recently updated first."""
        return sorted(
            item_store.iter_prompts(self.forest), key=lambda p: p.updated_at, reverse=True
        )

    def list_versions(self, prompt_id: str) -> List[VersionRecord]:
        """Version list for a prompt, current version first."""
        return list_versions(self.get_prompt(prompt_id))

    def folder_options(
        self, exclude_id: Optional[str] = None, include_root: bool = False
    ) -> List[FolderOption]:
        """Selectable folders with breadcrumb labels."""
        return item_store.list_folder_options(
            self.forest,
            exclude_id=exclude_id,
            include_root=include_root,
            separator=self.config.label_separator,
            root_label=self.config.root_option_label,
        )

    # =========================================================================
    # Creation
    # =========================================================================

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> Folder:
        """Create a folder under parent_id (None or 'root' for top level)."""
        self._check_name(name)
        folder = Folder(name=name, parent_id=None if parent_id in (None, ROOT_ID) else parent_id)
        self._commit(item_store.insert_folder(self.forest, parent_id, folder))
        self._publish(EventType.ITEM_CREATED, folder)
        return folder

    def create_prompt(
        self,
        name: str,
        content: str,
        folder_id: Optional[str] = None,
        is_favorite: bool = False,
    ) -> Prompt:
        """Create a prompt at version 1 inside folder_id (None or 'root' for top level)."""
        self._check_name(name)
        if not content:
            raise ValidationError("Prompt content cannot be empty.")

        prompt = Prompt(
            name=name,
            content=content,
            parent_id=None if folder_id in (None, ROOT_ID) else folder_id,
            is_favorite=is_favorite,
        )
        self._commit(item_store.insert_prompt(self.forest, folder_id, prompt))
        self._publish(EventType.ITEM_CREATED, prompt)
        return prompt

    # =========================================================================
    # Updates
    # =========================================================================

    def update_prompt(
        self,
        prompt_id: str,
        name: Optional[str] = None,
        content: Optional[str] = None,
        folder_id: Optional[str] = None,
        is_favorite: Optional[bool] = None,
    ) -> Prompt:
        """Update a prompt. Only a content change creates a new version.

        Args:
            prompt_id: Prompt to update.
            name: New name.
            content: New content.
            folder_id: Folder to move into; 'root' moves to top level.
            is_favorite: New favorite flag.

        Raises:
            ValidationError: If no update parameters are given.
        """
        if name is None and content is None and folder_id is None and is_favorite is None:
            raise ValidationError(
                "No update parameters provided. "
                "Please specify at least one of: name, content, folder, favorite."
            )
        before = self.get_prompt(prompt_id)

        forest = self.forest
        if name is not None:
            forest = item_store.rename_item(forest, prompt_id, name)
        if content is not None:
            forest = item_store.update_content(forest, prompt_id, content)
        if is_favorite is not None:
            forest = item_store.set_favorite(forest, prompt_id, is_favorite)
        if folder_id is not None:
            forest = item_store.move_item(forest, prompt_id, folder_id)

        if forest is self.forest:
            return before

        self._commit(forest)
        after = self.get_prompt(prompt_id)
        if after.version_number != before.version_number:
            logger.info("Prompt %s advanced to version %d", prompt_id, after.version_number)
            self._publish(
                EventType.PROMPT_VERSIONED,
                after,
                archived_version=before.version_number,
            )
        self._publish(EventType.ITEM_UPDATED, after)
        return after

    def update_folder(
        self,
        folder_id: str,
        name: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> Folder:
        """Rename a folder and/or move it ('root' moves to top level)."""
        if name is None and parent_id is None:
            raise ValidationError(
                "No update parameters provided. Please specify a name or a parent."
            )
        self.get_folder(folder_id)

        forest = self.forest
        if name is not None:
            forest = item_store.rename_item(forest, folder_id, name)
        if parent_id is not None:
            forest = item_store.move_item(forest, folder_id, parent_id)

        if forest is not self.forest:
            self._commit(forest)
            self._publish(EventType.ITEM_UPDATED, self.get_folder(folder_id))
        return self.get_folder(folder_id)

    def delete_item(self, item_id: str) -> Item:
        """Delete a prompt (with its history) or an empty folder."""
        item = self.get_item(item_id)
        self._commit(item_store.remove_item(self.forest, item_id))
        self._publish(EventType.ITEM_DELETED, item)
        return item

    def branch_prompt(self, prompt_id: str) -> Prompt:
        """Branch a prompt into a new prompt starting at version 1."""
        forest, branch = item_store.branch_prompt(
            self.forest, prompt_id, suffix=self.config.branch_suffix
        )
        self._commit(forest)
        self._publish(EventType.PROMPT_BRANCHED, branch, source_id=prompt_id)
        return branch

    # =========================================================================
    # Import / Export
    # =========================================================================

    def import_records(self, records: List[ImportedPrompt]) -> List[Prompt]:
        """Create one prompt per imported record and save them together.

        Records pointing at an unknown folder land at top level.
        """
        if not records:
            raise ImportFormatError("No prompts found in the file to import.")

        forest = self.forest
        created = []
        for record in records:
            folder_id = record.folder_id
            if folder_id and not isinstance(item_store.find_item(forest, folder_id), Folder):
                logger.warning(
                    "Folder %s not found for imported prompt '%s'; using top level",
                    folder_id, record.name,
                )
                folder_id = None
            prompt = Prompt(
                name=record.name,
                content=record.content,
                parent_id=folder_id,
                is_favorite=record.is_favorite,
            )
            forest = item_store.insert_prompt(forest, folder_id, prompt)
            created.append(prompt)

        self._commit(forest)
        self.event_bus.publish(
            VaultEvent(
                type=EventType.PROMPTS_IMPORTED,
                user_id=self.user_id,
                data={"count": len(created)},
            )
        )
        return created

    def import_prompts(self, path: Path) -> List[Prompt]:
        """Import prompts from a .json or .csv file."""
        return self.import_records(transfer.parse_file(Path(path)))

    def export_prompts(self, fmt: Optional[str] = None) -> str:
        """Export every prompt, most recently updated first."""
        fmt = fmt or self.config.default_export_format
        if fmt == "json":
            return transfer.export_json(self.prompts(), self.user_id)
        if fmt == "csv":
            return transfer.export_csv(self.prompts(), self.user_id)
        raise ValidationError(f"Invalid export format: '{fmt}'. Use 'json' or 'csv'.")

    # =========================================================================
    # Suggestions
    # =========================================================================

    def suggest(self, prompt_id: str, suggester: Suggester) -> List[str]:
        """Ask suggester for improvements to a prompt's current content."""
        prompt = self.get_prompt(prompt_id)
        return normalize_suggestions(suggester(prompt.content))
