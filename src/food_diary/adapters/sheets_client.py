"""Google Sheets REST API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from food_diary.domain.errors import RemoteStoreError


class TokenProvider(Protocol):
    """Source of OAuth bearer tokens for the Sheets API."""

    async def get_token(self) -> str:
        """Return a valid access token."""


class SheetsClient(Protocol):
    """Interface for Google Sheets value and batch operations."""

    async def get_values(
        self, spreadsheet_id: str, cell_range: str
    ) -> list[list[object]]:
        """Return the rows stored in a range."""

    async def update_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[str]]
    ) -> None:
        """Overwrite a range with the given rows."""

    async def append_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[str]]
    ) -> None:
        """Append rows after the last row of a range."""

    async def batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, object]]
    ) -> None:
        """Apply structural batch update requests."""

    async def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, object]:
        """Return spreadsheet metadata."""


@dataclass
class HttpxSheetsClient(SheetsClient):
    """HTTPX-backed Google Sheets client."""

    token_provider: TokenProvider
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, token_provider: TokenProvider, base_url: str) -> "HttpxSheetsClient":
        """Create a Sheets client with a managed httpx session."""
        return cls(
            token_provider=token_provider,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def get_values(
        self, spreadsheet_id: str, cell_range: str
    ) -> list[list[object]]:
        """Read a range of values."""
        url = f"{self.base_url}/spreadsheets/{spreadsheet_id}/values/{cell_range}"
        payload = await self._request("GET", url)
        values = payload.get("values")
        return values if isinstance(values, list) else []

    async def update_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[str]]
    ) -> None:
        """Write raw values into a range."""
        url = f"{self.base_url}/spreadsheets/{spreadsheet_id}/values/{cell_range}"
        await self._request(
            "PUT",
            url,
            params={"valueInputOption": "RAW"},
            json={"range": cell_range, "majorDimension": "ROWS", "values": values},
        )

    async def append_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[str]]
    ) -> None:
        """Append raw values as new rows."""
        url = (
            f"{self.base_url}/spreadsheets/{spreadsheet_id}/values/"
            f"{cell_range}:append"
        )
        await self._request(
            "POST",
            url,
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"range": cell_range, "majorDimension": "ROWS", "values": values},
        )

    async def batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, object]]
    ) -> None:
        """Send a spreadsheets.batchUpdate call."""
        url = f"{self.base_url}/spreadsheets/{spreadsheet_id}:batchUpdate"
        await self._request("POST", url, json={"requests": requests})

    async def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, object]:
        """Fetch the spreadsheet id and title."""
        url = f"{self.base_url}/spreadsheets/{spreadsheet_id}"
        return await self._request(
            "GET", url, params={"fields": "spreadsheetId,properties.title"}
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> dict[str, object]:
        token = await self.token_provider.get_token()
        try:
            response = await self.http_client.request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
                timeout=15,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteStoreError(
                f"Sheets API returned {exc.response.status_code}: "
                f"{_error_message(exc.response)}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteStoreError(f"Sheets API request failed: {exc}") from exc
        if not response.content:
            return {}
        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text
