"""Tests for the diary HTTP API."""

from dataclasses import dataclass

from fastapi.testclient import TestClient

from food_diary.api.app import create_app
from food_diary.config import Settings
from food_diary.containers import AppContainer
from food_diary.domain.errors import RemoteStoreError
from tests.conftest import FAKE_SUPABASE_KEY, InMemoryRemoteRepository

ENTRY_PAYLOAD = {
    "date": "2024-01-15",
    "time": "12:30",
    "mealType": "lunch",
    "foods": "lencsefőzelék",
    "hasComplaints": True,
    "complaintTypes": ["bloating"],
    "complaintSeverities": {"bloating": 2},
}


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def _enable_sync(client: TestClient) -> None:
    response = client.put(
        "/settings/sync", json={"enabled": True, "spreadsheetId": "sheet-1"}
    )
    assert response.status_code == 200


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_list_edit_delete_flow(
    container: AppContainer, remote_repository: InMemoryRemoteRepository
) -> None:
    client = _client(container)
    _enable_sync(client)

    created = client.post("/entries", json=ENTRY_PAYLOAD)
    assert created.status_code == 201
    body = created.json()
    entry_id = body["entry"]["id"]
    assert body["synced"] is True
    assert body["entry"]["complaintSeverities"] == {"bloating": 2}

    edited = client.put(
        f"/entries/{entry_id}", json={**ENTRY_PAYLOAD, "foods": "húsleves"}
    )
    assert edited.status_code == 200
    assert edited.json()["entry"]["foods"] == "húsleves"
    assert remote_repository.entries[0].foods == "húsleves"

    loaded = client.get("/entries")
    assert loaded.json()["source"] == "remote"
    assert [entry["id"] for entry in loaded.json()["entries"]] == [entry_id]

    deleted = client.delete(f"/entries/{entry_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"status": "ok", "synced": True, "warning": None}
    assert remote_repository.entries == []


def test_create_invalid_entry_returns_422(container: AppContainer) -> None:
    response = _client(container).post(
        "/entries", json={**ENTRY_PAYLOAD, "mealType": "brunch"}
    )

    assert response.status_code == 422
    assert "meal type" in response.json()["detail"]


def test_edit_with_mismatched_id_returns_400(container: AppContainer) -> None:
    response = _client(container).put(
        "/entries/1", json={**ENTRY_PAYLOAD, "id": "2"}
    )

    assert response.status_code == 400


def test_unknown_entry_returns_404(container: AppContainer) -> None:
    client = _client(container)

    assert client.put("/entries/missing", json=ENTRY_PAYLOAD).status_code == 404
    assert client.delete("/entries/missing").status_code == 404


def test_remote_failure_is_reported_as_warning(
    container: AppContainer, remote_repository: InMemoryRemoteRepository
) -> None:
    client = _client(container)
    _enable_sync(client)
    remote_repository.fail_on.add("append")

    response = client.post("/entries", json=ENTRY_PAYLOAD)

    assert response.status_code == 201
    assert response.json()["synced"] is False
    assert response.json()["warning"] == "append failed"


def test_manual_sync_seeds_empty_remote(
    container: AppContainer, remote_repository: InMemoryRemoteRepository
) -> None:
    client = _client(container)
    client.post("/entries", json=ENTRY_PAYLOAD)
    _enable_sync(client)

    response = client.post("/sync")

    assert response.json()["source"] == "seeded"
    assert response.json()["pushed"] == 1
    assert len(remote_repository.entries) == 1


def test_history_and_analytics(container: AppContainer) -> None:
    client = _client(container)
    client.post("/entries", json=ENTRY_PAYLOAD)
    client.post(
        "/entries",
        json={**ENTRY_PAYLOAD, "mealType": "dinner", "hasComplaints": False},
    )

    history = client.get("/entries/history", params={"complaints": "with"})
    assert history.status_code == 200
    assert history.json()["total"] == 2
    assert [entry["mealType"] for entry in history.json()["entries"]] == ["lunch"]

    analytics = client.get("/analytics").json()["analytics"]
    assert analytics["total_entries"] == 2
    assert analytics["complaints"][0]["id"] == "bloating"


def test_analytics_empty_diary(container: AppContainer) -> None:
    assert _client(container).get("/analytics").json() == {"analytics": None}


def test_export_csv_download(container: AppContainer) -> None:
    client = _client(container)
    client.post("/entries", json=ENTRY_PAYLOAD)

    response = client.get("/export.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "etkezesi-naplo-" in response.headers["content-disposition"]
    assert "lencsefőzelék" in response.text


def test_export_sheet_data_rows(container: AppContainer) -> None:
    client = _client(container)
    client.post("/entries", json=ENTRY_PAYLOAD)

    response = client.get("/export/sheet-data")

    assert response.status_code == 200
    values = response.json()["values"]
    assert values[0][0] == "ID"
    assert len(values) == 2
    assert values[1][3] == "Ebéd"
    assert values[1][9] == "Puffadás: 2"


def test_sync_settings_extract_id_from_url(container: AppContainer) -> None:
    client = _client(container)

    response = client.put(
        "/settings/sync",
        json={
            "enabled": True,
            "spreadsheetId": "https://docs.google.com/spreadsheets/d/abc_123/edit",
        },
    )

    assert response.json() == {"enabled": True, "spreadsheetId": "abc_123"}
    assert client.get("/settings/sync").json() == response.json()


def test_connection_check_success(container: AppContainer) -> None:
    client = _client(container)
    _enable_sync(client)

    response = client.get("/sync/test-connection")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["title"] == "Diary"


def test_connection_check_without_spreadsheet(container: AppContainer) -> None:
    response = _client(container).get("/sync/test-connection")

    assert response.status_code == 400
    assert response.json()["success"] is False


@dataclass
class _ForbiddenRemote(InMemoryRemoteRepository):
    async def describe(self) -> dict[str, object]:
        raise RemoteStoreError(
            "Sheets API returned 403: The caller does not have permission"
        )


def test_connection_check_permission_error_suggests_sharing(
    container: AppContainer,
) -> None:
    container.settings = Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=FAKE_SUPABASE_KEY,
        google_client_email="diary@project.iam.gserviceaccount.com",
    )
    container.diary_service.remote_factory = lambda _spreadsheet_id: _ForbiddenRemote()
    client = _client(container)
    _enable_sync(client)

    response = client.get("/sync/test-connection")

    assert response.status_code == 502
    assert response.json()["success"] is False
    assert response.json()["troubleshooting"] == (
        "Share your Google Sheet with this email: "
        "diary@project.iam.gserviceaccount.com"
    )


def test_reference_tables(container: AppContainer) -> None:
    body = _client(container).get("/reference").json()

    assert [meal["id"] for meal in body["mealTypes"]][0] == "breakfast"
    assert len(body["complaintTypes"]) == 10
    assert body["severityLevels"][3]["label"] == "Extrém"
