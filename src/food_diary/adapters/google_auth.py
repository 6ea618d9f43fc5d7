"""Service account credentials for the Google Sheets API."""

import asyncio
from dataclasses import dataclass

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from food_diary.domain.errors import ConfigurationError, RemoteStoreError

SCOPES = (
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.file",
)
TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass
class ServiceAccountTokenProvider:
    """Token provider backed by google-auth service account credentials."""

    credentials: service_account.Credentials

    @classmethod
    def create(cls, client_email: str, private_key: str) -> "ServiceAccountTokenProvider":
        """Build credentials from a service account email and private key."""
        if not client_email or not private_key:
            raise ConfigurationError(
                "Google service account credentials are not configured"
            )
        try:
            credentials = service_account.Credentials.from_service_account_info(
                {
                    "client_email": client_email,
                    "private_key": private_key,
                    "token_uri": TOKEN_URI,
                },
                scopes=list(SCOPES),
            )
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid Google service account credentials: {exc}"
            ) from exc
        return cls(credentials=credentials)

    @property
    def service_account_email(self) -> str:
        """Return the email the spreadsheet must be shared with."""
        return self.credentials.service_account_email

    async def get_token(self) -> str:
        """Return a cached access token, refreshing it when expired."""
        if not self.credentials.valid:
            try:
                await asyncio.to_thread(self.credentials.refresh, Request())
            except GoogleAuthError as exc:
                raise RemoteStoreError(
                    f"Failed to authenticate with Google: {exc}"
                ) from exc
        return str(self.credentials.token)
