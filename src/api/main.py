"""Точка входа сервиса облачной синхронизации трекера привычек.

Устройство работает офлайн и периодически обменивается с сервером полными
снимками данных (привычки, отметки, цели и их связи) через `/api/v1/sync`.
Здесь собирается приложение FastAPI: жизненный цикл подключения к БД,
обработчики ошибок синхронизации, роутеры и проверка готовности.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.config import settings
from src.api.core.database import db
from src.api.core.dependencies import DBSession
from src.api.core.exceptions import setup_exception_handlers
from src.api.core.logging import api_log as log
from src.api.routes import api_router
from src.core_shared.sentry_sdk_setup import setup_sentry

API_PREFIX = "/api"

OPENAPI_TAGS = [
    {
        "name": "Sync",
        "description": (
            "Обмен снимками данных устройства: статус, включение и отключение синхронизации, "
            "загрузка снимка (push) и выгрузка снимка (pull)."
        ),
    },
    {
        "name": "Health Check",
        "description": "Проверка готовности сервиса принимать снимки.",
    },
]

if settings.SENTRY_DSN:
    setup_sentry(settings, log)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # pragma: no cover
    """
    Подключает базу данных при старте и отключает при остановке.

    Args:
        app (FastAPI): Экземпляр приложения FastAPI.
    """
    log.info(f"Запуск '{settings.PROJECT_NAME}': подключение к хранилищу снимков...")
    try:
        await db.connect()
        yield
    except Exception as exc:
        log.opt(exception=exc).critical(f"Сервис синхронизации не запущен: {exc}")
        raise
    finally:
        await db.disconnect()
        log.info(f"'{settings.PROJECT_NAME}' остановлен.")


def create_app() -> FastAPI:
    """
    Собирает приложение синхронизации.

    Returns:
        FastAPI: Приложение с обработчиками ошибок и роутерами синхронизации.
    """
    log.info(
        f"Сборка '{settings.PROJECT_NAME}@{settings.API_VERSION}' "
        f"(разработка: {settings.DEVELOPMENT}, продакшен: {settings.PRODUCTION})"
    )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.API_VERSION,
        debug=settings.DEVELOPMENT,
        lifespan=lifespan,
        description="API синхронизации привычек, отметок и целей между устройствами пользователя",
        openapi_tags=OPENAPI_TAGS,
    )

    # Ошибки валидации снимка, авторизации и хранилища отдаются в едином формате {"detail": [...]}
    setup_exception_handlers(app)

    app.include_router(api_router, prefix=API_PREFIX)

    sync_paths = sorted(route.path for route in app.routes if route.path.startswith(f"{API_PREFIX}/"))
    log.info(f"Зарегистрированы эндпоинты синхронизации: {', '.join(sync_paths)}")
    return app


app = create_app()


async def is_database_available(db_session: AsyncSession) -> bool:
    """
    Проверяет, что хранилище снимков отвечает на запросы.

    Args:
        db_session (AsyncSession): Асинхронная сессия базы данных.

    Returns:
        bool: True, если запрос к БД выполнен.
    """
    try:
        await db_session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        log.opt(exception=exc).error(f"Health check: хранилище снимков недоступно: {exc}")
        return False
    return True


@app.get(
    "/healthcheck",
    tags=["Health Check"],
    summary="Готовность сервиса синхронизации",
    description=(
        "Сервис готов принимать и отдавать снимки, только если доступна база данных. "
        "Иначе возвращается HTTP 503."
    ),
)
async def health_check(response: Response, db_session: DBSession) -> dict[str, Any]:
    """
    Эндпоинт проверки готовности.

    Args:
        response (Response): Объект ответа FastAPI для управления статус-кодом.
        db_session (DBSession): Зависимость, предоставляющая сессию БД.

    Returns:
        dict: Статус API, версия и состояние базы данных.
    """
    is_db_ok = await is_database_available(db_session)

    if not is_db_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        log.warning("Health check провален: синхронизация недоступна без базы данных.")

    return {
        "api_status": "ok",
        "version": settings.API_VERSION,
        "dependencies": {"database": "ok" if is_db_ok else "error"},
    }
