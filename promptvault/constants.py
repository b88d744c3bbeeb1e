"""
Constants for the promptvault application.

Note: The DEFAULT_* values serve as fallbacks.
Actual values are loaded from .promptvault/config.json at runtime.
"""

# =============================================================================
# Tree Structure
# =============================================================================

# Literal accepted in place of a folder id to mean "top level"
ROOT_ID = "root"

INITIAL_VERSION_NUMBER = 1

# =============================================================================
# Default Fallback Values
# These are used if config.json doesn't exist or doesn't specify a value.
# =============================================================================

DEFAULT_VAULT_DIR = ".promptvault"
DEFAULT_USER_ID = "local"

DEFAULT_BRANCH_SUFFIX = " (Branch)"
DEFAULT_LABEL_SEPARATOR = " > "
DEFAULT_ROOT_OPTION_LABEL = "No Parent (Root Level)"
DEFAULT_EXPORT_FORMAT = "json"

SCHEMA_VERSION = "0.1.0"

# Environment variables read by the CLI
ENV_VAULT_DIR = "PROMPTVAULT_DIR"
ENV_USER_ID = "PROMPTVAULT_USER"

USER_ID_PATTERN = r"[A-Za-z0-9_.-]+"

# =============================================================================
# Import / Export
# =============================================================================

EXPORT_FORMATS = ["json", "csv"]

EXPORT_CSV_HEADERS = [
    "id", "name", "content", "folderId", "isFavorite",
    "versions", "createdAt", "updatedAt", "userId",
]

# Validation error messages (not configurable)
VALIDATION_NAME_REQUIRED = "Name is required for all items."
VALIDATION_CONTENT_REQUIRED = "Prompt content cannot be empty."
VALIDATION_SELF_PARENT = "A folder cannot be its own parent."
