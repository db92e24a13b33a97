from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from src.api.core.config import settings
from src.api.core.database import create_session_factory
from src.api.core.security import create_access_token
from src.api.models import AuthProvider, Base, User

# Уровни изоляции, которые принимает SQLite (пустая строка: уровень хранилища по умолчанию)
SQLITE_ISOLATION_LEVELS = ("", "SERIALIZABLE", "READ UNCOMMITTED")

# --- ФИКСТУРА БЕЗОПАСНОСТИ ---


@pytest.fixture(scope="session", autouse=True)
def verify_test_environment():
    """
    Проверяет, что тесты запускаются с корректными настройками окружения.

    Эта фикстура выполняется автоматически перед началом тестовой сессии.
    """
    # Проверяем режим разработки
    assert settings.DEVELOPMENT is True, (
        "❌ ОШИБКА КОНФИГУРАЦИИ: Тесты должны запускаться в режиме разработки/тестирования (DEVELOPMENT=True). "
        "Проверьте настройки [tool.pytest.ini_options] в pyproject.toml"
    )

    # Проверяем, что настройки не указывают на продакшен/основную базу данных
    assert "test" in settings.DB_NAME, (
        f"❌ ОПАСНОСТЬ: Тесты запущены с базой '{settings.DB_NAME}'. "
        "Тестовая база должна содержать 'test' в названии."
    )

    # Тесты работают на SQLite, который поддерживает только часть уровней изоляции
    assert settings.SYNC_PULL_ISOLATION_LEVEL in SQLITE_ISOLATION_LEVELS, (
        f"❌ ОШИБКА КОНФИГУРАЦИИ: SYNC_PULL_ISOLATION_LEVEL='{settings.SYNC_PULL_ISOLATION_LEVEL}' "
        f"не поддерживается SQLite. Допустимо: {SQLITE_ISOLATION_LEVELS}"
    )


# --- ГЛОБАЛЬНЫЕ ФИКСТУРЫ ДЛЯ ВСЕГО ПРОЕКТА ---


@pytest_asyncio.fixture(scope="function")
async def async_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Создает асинхронный движок SQLAlchemy поверх отдельного файла SQLite для каждого теста.

    Схема создается по метаданным моделей. Файл (а не :memory:) нужен, чтобы
    несколько сессий видели одни и те же данные.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
def db_session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Создает фабрику асинхронных сессий с настройками приложения."""
    return create_session_factory(async_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(db_session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """Предоставляет сессию БД для прямой работы с репозиториями в тестах."""
    async with db_session_factory() as session:
        yield session


async def _create_user(
    db_session_factory: async_sessionmaker[AsyncSession],
    *,
    provider_id: str,
    cloud_sync_enabled: bool,
) -> User:
    """Создает пользователя так, как это делает сервис аутентификации (OAuth)."""
    async with db_session_factory() as session:
        user = User(
            email=f"{provider_id}@example.com",
            name=f"User {provider_id}",
            provider=AuthProvider.GOOGLE,
            provider_id=provider_id,
            cloud_sync_enabled=cloud_sync_enabled,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest_asyncio.fixture(scope="function")
async def sync_user(db_session_factory: async_sessionmaker[AsyncSession]) -> User:
    """Пользователь с включенной облачной синхронизацией."""
    return await _create_user(db_session_factory, provider_id="google-sync-user", cloud_sync_enabled=True)


@pytest_asyncio.fixture(scope="function")
async def local_only_user(db_session_factory: async_sessionmaker[AsyncSession]) -> User:
    """Пользователь, который хранит данные только на устройстве (синхронизация отключена)."""
    return await _create_user(db_session_factory, provider_id="google-local-user", cloud_sync_enabled=False)


def make_auth_headers(user: User) -> dict[str, str]:
    """Формирует заголовок Authorization с JWT для пользователя."""
    token = create_access_token(data={"user_id": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def user_auth_headers(sync_user: User) -> dict[str, str]:
    """Заголовки авторизации пользователя с включенной синхронизацией."""
    return make_auth_headers(sync_user)


@pytest.fixture(scope="function")
def local_only_auth_headers(local_only_user: User) -> dict[str, str]:
    """Заголовки авторизации пользователя с отключенной синхронизацией."""
    return make_auth_headers(local_only_user)


@pytest.fixture(scope="function")
def count_rows(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[type[Base]], Awaitable[int]]:
    """
    Возвращает функцию подсчета строк таблицы модели.

    Каждый подсчет выполняется в новой сессии, то есть видит только зафиксированные данные.
    """

    async def _count(model: type[Base]) -> int:
        async with db_session_factory() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    return _count
