"""Errors raised by the diary and its sync adapters."""


class DiaryError(Exception):
    """Base error for diary operations."""


class ConfigurationError(DiaryError):
    """Remote store credentials or identifier are missing."""


class RemoteStoreError(DiaryError):
    """The remote store could not be reached or rejected the request."""


class EntryNotFoundError(DiaryError):
    """No entry with the requested id exists."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"Entry not found: {entry_id}")
        self.entry_id = entry_id


class EntryValidationError(DiaryError):
    """An entry is missing required fields or carries invalid values."""
