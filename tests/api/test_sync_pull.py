from datetime import datetime, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from src.api.core.config import settings
from tests.api.sync_payloads import (
    PULL_URL,
    PUSH_URL,
    check_in_payload,
    goal_payload,
    habit_payload,
    snapshot_payload,
)

# Помечаем все тесты в модуле как асинхронные
pytestmark = pytest.mark.asyncio


async def test_pull_after_push_returns_all_entities(test_client: AsyncClient, user_auth_headers: dict[str, str]):
    """Выгрузка сразу после загрузки возвращает те же количества записей и более позднее время снимка."""
    payload = snapshot_payload(
        habits=[habit_payload("h1"), habit_payload("h2"), habit_payload("h3")],
        check_ins=[
            check_in_payload("c1", "h1"),
            check_in_payload("c2", "h1", effectiveDate="2026-10-02"),
            check_in_payload("c3", "h2"),
            check_in_payload("c4", "h3"),
        ],
        goals=[goal_payload("g1"), goal_payload("g2")],
        goal_habits=[{"goalLocalId": "g1", "habitLocalId": "h1"}],
    )
    push_response = await test_client.post(PUSH_URL, json=payload, headers=user_auth_headers)
    assert push_response.status_code == status.HTTP_200_OK

    response = await test_client.get(PULL_URL, headers=user_auth_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data["habits"]) == 3
    assert len(data["checkIns"]) == 4
    assert len(data["goals"]) == 2
    assert len(data["goalHabits"]) == 1

    pushed_at = datetime.fromisoformat(push_response.json()["syncedAt"])
    pulled_at = datetime.fromisoformat(data["syncedAt"])
    assert pulled_at > pushed_at


async def test_pull_exports_canonical_ids_as_local_ids(test_client: AsyncClient, user_auth_headers: dict[str, str]):
    """Канонические ID выгружаются в полях локальных ID, ссылки между сущностями согласованы."""
    payload = snapshot_payload(
        habits=[habit_payload("device-habit", name="Water", targetDirection="exactly")],
        check_ins=[check_in_payload("device-check-in", "device-habit", value=5, note="Хорошо")],
        goals=[goal_payload("device-goal", status="achieved")],
        goal_habits=[{"goalLocalId": "device-goal", "habitLocalId": "device-habit", "weight": 0.5}],
    )
    await test_client.post(PUSH_URL, json=payload, headers=user_auth_headers)

    response = await test_client.get(PULL_URL, headers=user_auth_headers)
    data = response.json()

    habit = data["habits"][0]
    check_in = data["checkIns"][0]
    goal = data["goals"][0]
    link = data["goalHabits"][0]

    # Локальные ID устройства не сохраняются, выгружаются серверные
    assert habit["localId"] != "device-habit"
    assert goal["localId"] != "device-goal"
    assert check_in["habitLocalId"] == habit["localId"]
    assert link == {"goalLocalId": goal["localId"], "habitLocalId": habit["localId"], "weight": 0.5}

    assert habit["name"] == "Water"
    assert habit["habitType"] == "numeric"
    assert habit["targetDirection"] == "exactly"
    assert check_in["value"] == 5
    assert check_in["note"] == "Хорошо"
    assert check_in["effectiveDate"] == "2026-10-01"
    assert goal["deadline"] == "2026-12-31"
    assert goal["status"] == "achieved"


async def test_pull_returns_only_own_data(
    test_client: AsyncClient,
    user_auth_headers: dict[str, str],
    local_only_auth_headers: dict[str, str],
):
    """Выгрузка содержит только данные текущего пользователя."""
    await test_client.post("/api/v1/sync/enable", headers=local_only_auth_headers)
    await test_client.post(
        PUSH_URL,
        json=snapshot_payload(habits=[habit_payload("other")], goals=[goal_payload("other-goal")]),
        headers=local_only_auth_headers,
    )

    response = await test_client.get(PULL_URL, headers=user_auth_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["habits"] == []
    assert data["goals"] == []
    assert data["goalHabits"] == []


async def test_pull_with_sync_disabled(test_client: AsyncClient, local_only_auth_headers: dict[str, str]):
    """Выгрузка при отключенной синхронизации отклоняется с 400."""
    response = await test_client.get(PULL_URL, headers=local_only_auth_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"][0]["type"] == "sync_disabled"


async def test_pull_with_configured_isolation_level(
    test_client: AsyncClient,
    user_auth_headers: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
):
    """Чтения выгрузки выполняются на соединении с уровнем изоляции из настроек."""
    monkeypatch.setattr(settings, "SYNC_PULL_ISOLATION_LEVEL", "SERIALIZABLE")

    requested_options: list[dict] = []
    original_connection = AsyncSession.connection

    async def recording_connection(self, *args, **kwargs):
        requested_options.append(kwargs.get("execution_options") or {})
        return await original_connection(self, *args, **kwargs)

    monkeypatch.setattr(AsyncSession, "connection", recording_connection)

    payload = snapshot_payload(
        habits=[habit_payload("h1")],
        check_ins=[check_in_payload("c1", "h1")],
        goals=[goal_payload("g1")],
        goal_habits=[{"goalLocalId": "g1", "habitLocalId": "h1"}],
    )
    push_response = await test_client.post(PUSH_URL, json=payload, headers=user_auth_headers)
    assert push_response.status_code == status.HTTP_200_OK

    response = await test_client.get(PULL_URL, headers=user_auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert {"isolation_level": "SERIALIZABLE"} in requested_options

    data = response.json()
    habit_id = data["habits"][0]["localId"]
    goal_id = data["goals"][0]["localId"]
    assert data["checkIns"][0]["habitLocalId"] == habit_id
    assert data["goalHabits"] == [{"goalLocalId": goal_id, "habitLocalId": habit_id, "weight": 1.0}]


async def test_pull_exports_timestamps_in_utc(test_client: AsyncClient, user_auth_headers: dict[str, str]):
    """Моменты времени со смещением сохраняются и выгружаются как тот же момент в UTC."""
    payload = snapshot_payload(
        habits=[habit_payload("h1", createdAt="2026-10-01T08:00:00+03:00", updatedAt="2026-10-01T09:30:00+03:00")],
    )
    await test_client.post(PUSH_URL, json=payload, headers=user_auth_headers)

    response = await test_client.get(PULL_URL, headers=user_auth_headers)

    habit = response.json()["habits"][0]
    assert datetime.fromisoformat(habit["createdAt"]) == datetime(2026, 10, 1, 5, 0, tzinfo=timezone.utc)
    assert datetime.fromisoformat(habit["updatedAt"]) == datetime(2026, 10, 1, 6, 30, tzinfo=timezone.utc)
