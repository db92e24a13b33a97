"""Построители тел запросов синхронизации в формате устройства (camelCase)."""

from typing import Any

PUSH_URL = "/api/v1/sync/push"
PULL_URL = "/api/v1/sync/pull"


def habit_payload(local_id: str, **overrides: Any) -> dict[str, Any]:
    """Привычка в формате снимка устройства."""
    payload = {
        "localId": local_id,
        "name": f"Habit {local_id}",
        "description": None,
        "habitType": "numeric",
        "unit": "glasses",
        "targetValue": 8,
        "targetDirection": "at_least",
        "archived": False,
        "createdAt": "2026-10-01T08:00:00Z",
        "updatedAt": "2026-10-01T08:00:00Z",
    }
    payload.update(overrides)
    return payload


def check_in_payload(local_id: str, habit_local_id: str, **overrides: Any) -> dict[str, Any]:
    """Отметка в формате снимка устройства."""
    payload = {
        "localId": local_id,
        "habitLocalId": habit_local_id,
        "value": 1,
        "note": None,
        "effectiveDate": "2026-10-01",
        "createdAt": "2026-10-01T20:00:00Z",
    }
    payload.update(overrides)
    return payload


def goal_payload(local_id: str, **overrides: Any) -> dict[str, Any]:
    """Цель в формате снимка устройства."""
    payload = {
        "localId": local_id,
        "name": f"Goal {local_id}",
        "description": "Stay hydrated",
        "deadline": "2026-12-31",
        "status": "active",
        "createdAt": "2026-10-01T08:00:00Z",
        "updatedAt": "2026-10-01T08:00:00Z",
    }
    payload.update(overrides)
    return payload


def snapshot_payload(**collections: list[dict[str, Any]]) -> dict[str, Any]:
    """Снимок устройства с переданными коллекциями."""
    return {
        "habits": collections.get("habits", []),
        "checkIns": collections.get("check_ins", []),
        "goals": collections.get("goals", []),
        "goalHabits": collections.get("goal_habits", []),
        "syncedAt": "2026-10-02T09:00:00Z",
    }
