"""
Custom exceptions for the promptvault application.
"""


class PromptVaultError(Exception):
    """Base exception for all promptvault errors."""
    pass


class ValidationError(PromptVaultError):
    """Raised when a name, content or other input fails validation."""
    pass


class NotFoundError(PromptVaultError):
    """Raised when an operation addresses an id absent from the forest."""
    pass


class InvalidStateError(PromptVaultError):
    """Raised when an operation is not allowed in the item's current state."""
    pass


class StorageError(PromptVaultError):
    """Raised when reading or writing vault files fails."""
    pass


class ImportFormatError(ValidationError):
    """Raised when an import file cannot be parsed."""
    pass


class ConfigurationError(PromptVaultError):
    """Raised when there's a configuration or setup issue."""
    pass
