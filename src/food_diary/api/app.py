"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Literal

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from food_diary.api.models import FoodEntryPayload, SyncSettingsPayload
from food_diary.app_logging import configure_logging
from food_diary.codec import entry_to_json
from food_diary.containers import AppContainer
from food_diary.domain.entries import SyncConfig
from food_diary.domain.errors import (
    ConfigurationError,
    EntryNotFoundError,
    EntryValidationError,
    RemoteStoreError,
)
from food_diary.domain.reference import COMPLAINT_TYPES, MEAL_TYPES, SEVERITY_LEVELS
from food_diary.services.diary import MutationOutcome
from food_diary.services.export import CSV_MEDIA_TYPE
from food_diary.services.sync import SyncResult


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/entries")
    async def load_entries(request: Request) -> dict[str, object]:
        """Return the active entries, reconciling with the spreadsheet."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.diary_service.load()
        return _sync_response(result)

    @app.post("/entries", status_code=status.HTTP_201_CREATED)
    async def add_entry(
        payload: FoodEntryPayload, request: Request
    ) -> dict[str, object]:
        """Create a new entry."""
        state_container: AppContainer = request.app.state.container
        try:
            outcome = await state_container.diary_service.add(payload.to_entry())
        except EntryValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _mutation_response(outcome)

    @app.put("/entries/{entry_id}")
    async def edit_entry(
        entry_id: str, payload: FoodEntryPayload, request: Request
    ) -> dict[str, object]:
        """Replace an existing entry."""
        state_container: AppContainer = request.app.state.container
        if payload.id and payload.id != entry_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Entry id cannot be changed",
            )
        try:
            outcome = await state_container.diary_service.edit(
                payload.to_entry(entry_id)
            )
        except EntryNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return _mutation_response(outcome)

    @app.delete("/entries/{entry_id}")
    async def delete_entry(entry_id: str, request: Request) -> dict[str, object]:
        """Delete an entry."""
        state_container: AppContainer = request.app.state.container
        try:
            outcome = await state_container.diary_service.delete(entry_id)
        except EntryNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return {"status": "ok", "synced": outcome.synced, "warning": outcome.warning}

    @app.get("/entries/history")
    async def entry_history(
        request: Request,
        search: str | None = None,
        meal_type: str | None = None,
        complaints: Literal["all", "with", "without"] = "all",
        days: int | None = None,
    ) -> dict[str, object]:
        """Return filtered entries, newest first."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.diary_service.list_entries()
        filtered = state_container.stats_service.history(
            entries,
            search=search,
            meal_type=meal_type,
            complaints=complaints,
            days=days,
        )
        return {
            "entries": [entry_to_json(entry) for entry in filtered],
            "total": len(entries),
        }

    @app.get("/analytics")
    async def analytics(request: Request) -> dict[str, object]:
        """Return aggregate statistics over the diary."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.diary_service.list_entries()
        summary = state_container.stats_service.analytics(entries)
        return {"analytics": asdict(summary) if summary else None}

    @app.get("/export.csv")
    async def export_csv(request: Request) -> Response:
        """Download the diary as CSV."""
        state_container: AppContainer = request.app.state.container
        export_service = state_container.export_service
        entries = state_container.diary_service.list_entries()
        filename = export_service.export_filename()
        return Response(
            content=export_service.export_csv(entries),
            media_type=CSV_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/export/sheet-data")
    async def export_sheet_data(request: Request) -> dict[str, object]:
        """Return header and entry rows for pasting into a spreadsheet."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.diary_service.list_entries()
        return {"values": state_container.export_service.sheet_data(entries)}

    @app.get("/settings/sync")
    async def get_sync_settings(request: Request) -> dict[str, object]:
        """Return the sync settings."""
        state_container: AppContainer = request.app.state.container
        return _sync_config_response(state_container.diary_service.get_sync_config())

    @app.put("/settings/sync")
    async def update_sync_settings(
        payload: SyncSettingsPayload, request: Request
    ) -> dict[str, object]:
        """Store the sync settings."""
        state_container: AppContainer = request.app.state.container
        config = state_container.diary_service.update_sync_config(
            enabled=payload.enabled, spreadsheet_id=payload.spreadsheet_id
        )
        return _sync_config_response(config)

    @app.post("/sync")
    async def sync(request: Request) -> dict[str, object]:
        """Run a reconciliation on demand."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.diary_service.load()
        return _sync_response(result)

    @app.get("/sync/test-connection")
    async def test_connection(request: Request) -> JSONResponse:
        """Check that the spreadsheet is reachable with the configured account."""
        state_container: AppContainer = request.app.state.container
        try:
            metadata = await state_container.diary_service.test_connection()
        except ConfigurationError as exc:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"success": False, "error": str(exc)},
            )
        except RemoteStoreError as exc:
            logger.warning("Connection test failed: %s", exc)
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={
                    "success": False,
                    "error": str(exc),
                    "troubleshooting": _troubleshooting(state_container, exc),
                },
            )
        return JSONResponse(
            content={"success": True, "message": "Connection successful!", **metadata}
        )

    @app.get("/reference")
    async def reference() -> dict[str, object]:
        """Return the meal, complaint and severity tables."""
        return {
            "mealTypes": [asdict(meal) for meal in MEAL_TYPES],
            "complaintTypes": [asdict(complaint) for complaint in COMPLAINT_TYPES],
            "severityLevels": [asdict(level) for level in SEVERITY_LEVELS],
        }

    return app


def _sync_response(result: SyncResult) -> dict[str, object]:
    return {
        "entries": [entry_to_json(entry) for entry in result.entries],
        "source": result.source,
        "pushed": result.pushed,
        "error": result.error,
    }


def _mutation_response(outcome: MutationOutcome) -> dict[str, object]:
    return {
        "entry": entry_to_json(outcome.entry) if outcome.entry else None,
        "synced": outcome.synced,
        "warning": outcome.warning,
    }


def _sync_config_response(config: SyncConfig) -> dict[str, object]:
    return {"enabled": config.enabled, "spreadsheetId": config.spreadsheet_id}


def _troubleshooting(state_container: AppContainer, exc: Exception) -> str | None:
    email = state_container.settings.google_client_email
    if email and "permission" in str(exc).lower():
        return f"Share your Google Sheet with this email: {email}"
    return None
