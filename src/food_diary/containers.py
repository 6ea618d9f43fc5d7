"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

from supabase import create_client

from food_diary.adapters.google_auth import ServiceAccountTokenProvider
from food_diary.adapters.sheets_client import HttpxSheetsClient
from food_diary.adapters.sheets_entry_repository import SheetsEntryRepository
from food_diary.adapters.supabase_key_value_store import SupabaseKeyValueStore
from food_diary.config import Settings
from food_diary.services.diary import DiaryService, RemoteFactory
from food_diary.services.export import ExportService
from food_diary.services.local_cache import LocalCache
from food_diary.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    diary_service: DiaryService
    export_service: ExportService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    store = SupabaseKeyValueStore(
        supabase_client, table_name=resolved_settings.local_store_table
    )
    sheets_client: HttpxSheetsClient | None = None
    remote_factory: RemoteFactory | None = None
    if resolved_settings.has_google_credentials:
        token_provider = ServiceAccountTokenProvider.create(
            client_email=str(resolved_settings.google_client_email),
            private_key=str(resolved_settings.resolved_private_key()),
        )
        sheets_client = HttpxSheetsClient.create(
            token_provider=token_provider,
            base_url=resolved_settings.sheets_base_url,
        )
        remote_factory = partial(
            SheetsEntryRepository,
            sheets_client,
            sheet_id=resolved_settings.sheets_sheet_id,
        )
    diary_service = DiaryService(
        cache=LocalCache(store),
        remote_factory=remote_factory,
        default_spreadsheet_id=resolved_settings.google_spreadsheet_id,
    )

    async def close_resources() -> None:
        if sheets_client is not None:
            await sheets_client.close()

    return AppContainer(
        settings=resolved_settings,
        diary_service=diary_service,
        export_service=ExportService(),
        stats_service=StatsService(),
        close_resources=close_resources,
    )
