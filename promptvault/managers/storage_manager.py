"""
Storage manager for promptvault.

Handles loading and saving of all JSON files in the .promptvault/ directory.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from promptvault.constants import DEFAULT_VAULT_DIR, USER_ID_PATTERN
from promptvault.exceptions import ConfigurationError, StorageError
from promptvault.models.files import ConfigFile, UserVaultFile

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages persistence of vault data to JSON files in the .promptvault/ directory.

    Layout:
        .promptvault/config.json
        .promptvault/users/<user_id>.json

    Handles atomic writes to prevent data corruption.
    """

    def __init__(self, vault_dir: Optional[Path] = None) -> None:
        """
        Initialize the StorageManager with a .promptvault/ directory path.

        Args:
            vault_dir: Path to the vault directory. Defaults to .promptvault/ in current directory.
        """
        self.vault_dir = Path(vault_dir) if vault_dir else Path(DEFAULT_VAULT_DIR)
        self.users_dir = self.vault_dir / "users"
        self._ensure_vault_dir()

    def _ensure_vault_dir(self) -> None:
        """Create the vault directory and users subdirectory if they don't exist."""
        self.vault_dir.mkdir(parents=True, exist_ok=True)
        self.users_dir.mkdir(exist_ok=True)

    def _atomic_write(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Write data to a JSON file atomically to prevent corruption.

        Raises:
            StorageError: If writing to file fails.
        """
        temp_fd, temp_path = tempfile.mkstemp(
            dir=file_path.parent, prefix=".tmp_vault_", suffix=".json"
        )

        try:
            with os.fdopen(temp_fd, "w") as temp_file:
                json.dump(data, temp_file, indent=2)
            os.replace(temp_path, file_path)
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"Failed to write to {file_path}: {e}")

    def _user_file(self, user_id: str) -> Path:
        if not re.fullmatch(USER_ID_PATTERN, user_id):
            raise ConfigurationError(
                f"Invalid user id: '{user_id}'. Use letters, digits, '.', '_' or '-'."
            )
        return self.users_dir / f"{user_id}.json"

    # =========================================================================
    # User Vault File
    # =========================================================================

    def load_user_vault(self, user_id: str) -> UserVaultFile:
        """Load users/<user_id>.json and return as UserVaultFile model."""
        file_path = self._user_file(user_id)
        if not file_path.exists():
            return UserVaultFile(user_id=user_id)

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            vault = UserVaultFile.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load vault for user '{user_id}': {e}")

        logger.debug(
            "Loaded %d folders and %d prompts for %s",
            len(vault.folders), len(vault.prompts), user_id,
        )
        return vault

    def save_user_vault(self, data: UserVaultFile) -> None:
        """Save UserVaultFile model to users/<user_id>.json."""
        file_path = self._user_file(data.user_id)
        self._atomic_write(file_path, data.model_dump(mode="json"))

    # =========================================================================
    # Config File
    # =========================================================================

    def load_config(self) -> ConfigFile:
        """Load config.json and return as ConfigFile model."""
        file_path = self.vault_dir / "config.json"
        if not file_path.exists():
            return ConfigFile()

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return ConfigFile.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load config.json: {e}")

    def save_config(self, data: ConfigFile) -> None:
        """Save ConfigFile model to config.json."""
        file_path = self.vault_dir / "config.json"
        self._atomic_write(file_path, data.model_dump(mode="json"))
