"""Application configuration."""

import os
import re

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_SPREADSHEET_URL = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    local_store_table: str = "diary_kv"
    google_client_email: str | None = None
    google_private_key: str | None = None
    google_spreadsheet_id: str | None = None
    sheets_base_url: str = "https://sheets.googleapis.com/v4"
    sheets_sheet_id: int = 0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def has_google_credentials(self) -> bool:
        """Return True when a service account is configured."""
        return bool(self.google_client_email and self.google_private_key)

    def resolved_private_key(self) -> str | None:
        """Return the private key with escaped newlines restored."""
        if self.google_private_key is None:
            return None
        return self.google_private_key.replace("\\n", "\n")


def extract_spreadsheet_id(value: str) -> str:
    """Reduce a pasted spreadsheet URL to its id."""
    cleaned = value.strip()
    match = _SPREADSHEET_URL.search(cleaned)
    return match.group(1) if match else cleaned
