"""Google Sheets repository for diary entries."""

import logging
from dataclasses import dataclass

from food_diary.adapters.sheets_client import SheetsClient
from food_diary.codec import SHEET_HEADERS, entry_to_row, row_to_entry
from food_diary.domain.entries import FoodEntry
from food_diary.domain.errors import EntryNotFoundError
from food_diary.services.sync import RemoteEntryRepository

logger = logging.getLogger(__name__)

LAST_COLUMN = "L"
HEADER_RANGE = f"A1:{LAST_COLUMN}1"
TABLE_RANGE = f"A:{LAST_COLUMN}"
DATA_RANGE = f"A2:{LAST_COLUMN}"
ID_RANGE = "A:A"
FIRST_DATA_ROW = 2

_HEADER_FORMAT = {
    "backgroundColor": {"red": 0.2, "green": 0.6, "blue": 1.0},
    "textFormat": {
        "bold": True,
        "foregroundColor": {"red": 1, "green": 1, "blue": 1},
    },
}


@dataclass
class SheetsEntryRepository(RemoteEntryRepository):
    """Spreadsheet with a header row followed by one entry per row."""

    client: SheetsClient
    spreadsheet_id: str
    sheet_id: int = 0

    async def ensure_headers(self) -> None:
        """Write and style the header row when row 1 is empty."""
        existing = await self.client.get_values(self.spreadsheet_id, HEADER_RANGE)
        if existing:
            return
        logger.info("Writing header row to spreadsheet %s", self.spreadsheet_id)
        await self.client.update_values(
            self.spreadsheet_id, HEADER_RANGE, [list(SHEET_HEADERS)]
        )
        await self.client.batch_update(
            self.spreadsheet_id,
            [
                {
                    "repeatCell": {
                        "range": {
                            "sheetId": self.sheet_id,
                            "startRowIndex": 0,
                            "endRowIndex": 1,
                            "startColumnIndex": 0,
                            "endColumnIndex": len(SHEET_HEADERS),
                        },
                        "cell": {"userEnteredFormat": _HEADER_FORMAT},
                        "fields": "userEnteredFormat",
                    }
                }
            ],
        )

    async def append(self, entry: FoodEntry) -> None:
        """Append an entry after the last row."""
        await self.ensure_headers()
        await self.client.append_values(
            self.spreadsheet_id, TABLE_RANGE, [entry_to_row(entry)]
        )

    async def update_row(self, row_index: int, entry: FoodEntry) -> None:
        """Overwrite the row at a 1-based index with the entry."""
        if row_index < FIRST_DATA_ROW:
            raise ValueError(f"Row {row_index} is not a data row")
        cell_range = f"A{row_index}:{LAST_COLUMN}{row_index}"
        await self.client.update_values(
            self.spreadsheet_id, cell_range, [entry_to_row(entry)]
        )

    async def update(self, entry: FoodEntry) -> None:
        """Locate the entry's row by id and overwrite it."""
        row_index = await self.find_row(entry.id)
        if row_index is None:
            raise EntryNotFoundError(entry.id)
        await self.update_row(row_index, entry)

    async def find_row(self, entry_id: str) -> int | None:
        """Return the 1-based row index holding the id, if any."""
        rows = await self.client.get_values(self.spreadsheet_id, ID_RANGE)
        for offset, row in enumerate(rows[FIRST_DATA_ROW - 1 :]):
            if row and row[0] == entry_id:
                return offset + FIRST_DATA_ROW
        return None

    async def delete(self, entry_id: str) -> None:
        """Remove the single row holding the id."""
        row_index = await self.find_row(entry_id)
        if row_index is None:
            raise EntryNotFoundError(entry_id)
        await self.client.batch_update(
            self.spreadsheet_id,
            [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": self.sheet_id,
                            "dimension": "ROWS",
                            "startIndex": row_index - 1,
                            "endIndex": row_index,
                        }
                    }
                }
            ],
        )

    async def list_all(self) -> list[FoodEntry]:
        """Return every data row decoded, in stored order."""
        rows = await self.client.get_values(self.spreadsheet_id, DATA_RANGE)
        entries: list[FoodEntry] = []
        seen_ids = {str(row[0]) for row in rows if row and row[0]}
        for offset, row in enumerate(rows):
            if not any(row):
                continue
            try:
                entry = row_to_entry(row, seen_ids)
            except (TypeError, ValueError):
                logger.warning(
                    "Skipping unreadable row %s", offset + FIRST_DATA_ROW, exc_info=True
                )
                continue
            seen_ids.add(entry.id)
            entries.append(entry)
        return entries

    async def describe(self) -> dict[str, object]:
        """Return the spreadsheet id and title."""
        metadata = await self.client.get_spreadsheet(self.spreadsheet_id)
        properties = metadata.get("properties")
        title = properties.get("title") if isinstance(properties, dict) else None
        return {
            "spreadsheet_id": metadata.get("spreadsheetId", self.spreadsheet_id),
            "title": title,
        }
