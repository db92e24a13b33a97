import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from src.api.core.config import settings

# Помечаем все тесты в модуле как асинхронные
pytestmark = pytest.mark.asyncio

HEALTHCHECK_URL = "/healthcheck"


async def test_health_check_with_available_database(test_client: AsyncClient):
    """При доступной базе данных сервис готов к синхронизации."""
    response = await test_client.get(HEALTHCHECK_URL)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "api_status": "ok",
        "version": settings.API_VERSION,
        "dependencies": {"database": "ok"},
    }


async def test_health_check_with_unavailable_database(test_client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    """Ошибка запроса к базе данных переводит проверку в 503."""

    async def failing_execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))

    monkeypatch.setattr(AsyncSession, "execute", failing_execute)

    response = await test_client.get(HEALTHCHECK_URL)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["api_status"] == "ok"
    assert response.json()["dependencies"]["database"] == "error"


async def test_sync_routes_are_registered(test_client: AsyncClient):
    """Все эндпоинты синхронизации опубликованы в схеме OpenAPI под /api/v1/sync."""
    response = await test_client.get("/openapi.json")

    paths = set(response.json()["paths"])
    assert {
        "/api/v1/sync/status",
        "/api/v1/sync/enable",
        "/api/v1/sync/disable",
        "/api/v1/sync/push",
        "/api/v1/sync/pull",
    } <= paths
