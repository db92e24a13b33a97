"""Настройка подключения к базе данных с использованием SQLAlchemy."""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import settings
from .logging import api_log as log


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Создает фабрику сессий с настройками, общими для приложения и тестов.

    Транзакциями и flush управляют сервисы явно, объекты не протухают после commit.

    Args:
        engine (AsyncEngine): Асинхронный движок SQLAlchemy.

    Returns:
        async_sessionmaker[AsyncSession]: Фабрика асинхронных сессий.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


class Database:
    """
    Менеджер подключений к базе данных.

    Отвечает за:
    - Инициализацию подключения и пула соединений
    - Создание сессий (одна сессия на запрос)
    - Корректное закрытие пула при остановке приложения
    """

    def __init__(self) -> None:
        """Инициализирует менеджер с пустыми подключениями."""
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self, database_url: str | None = None, **kwargs: Any) -> None:
        """
        Устанавливает подключение к базе данных.

        Args:
            database_url (str | None): URL базы данных. Если None, используется `DATABASE_URL` из настроек.
            **kwargs: Дополнительные параметры для create_async_engine.

        Raises:
            RuntimeError: При неудачной проверке подключения.
        """
        self.engine = create_async_engine(
            database_url or str(settings.DATABASE_URL),
            echo=settings.DEVELOPMENT,  # Логирование SQL запросов в режиме DEVELOPMENT
            pool_pre_ping=True,  # Проверять соединение перед использованием
            pool_recycle=3600,  # Переподключение каждый час
            **kwargs,
        )
        self.session_factory = create_session_factory(self.engine)

        await self._verify_connection()
        log.success("Подключение к базе данных установлено.")

    async def disconnect(self) -> None:
        """Корректное закрытие подключения к базе данных."""
        if self.engine:
            log.info("Закрытие подключения к базе данных...")
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            log.info("Подключение к базе данных успешно закрыто.")

    async def _verify_connection(self) -> None:
        """
        Проверяет работоспособность подключения к базе данных.

        Raises:
            RuntimeError: Если проверка подключения не удалась.
        """
        if not self.session_factory:
            raise RuntimeError("Фабрика сессий не инициализирована.")
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
            log.debug("Проверка подключения к БД прошла успешно.")
        except Exception as exc:
            log.opt(exception=exc).critical(f"Ошибка подключения к базе данных: {exc}")
            raise RuntimeError("Не удалось проверить подключение к БД.") from exc

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Асинхронный контекстный менеджер для работы с сессиями БД.

        Любое исключение внутри блока (включая обрыв клиентского соединения)
        откатывает незафиксированную транзакцию.

        Yields:
            AsyncSession: Экземпляр сессии БД.

        Raises:
            RuntimeError: При вызове до инициализации подключения (`db.connect`).
        """
        if not self.session_factory:
            raise RuntimeError(
                "База данных не инициализирована. Вызовите `await db.connect()` перед использованием сессий."
            )

        async with self.session_factory() as session:
            try:
                yield session
            except Exception as exc:
                # Трейсбек только в DEVELOPMENT
                log.opt(exception=exc if settings.DEVELOPMENT else None).error(
                    f"Ошибка во время сессии БД, выполняется откат: {exc}"
                )
                await session.rollback()
                raise


# Глобальный экземпляр менеджера БД
db = Database()


# Dependency для FastAPI
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Зависимость FastAPI для получения асинхронной сессии базы данных.

    Yields:
        AsyncSession: Сессия базы данных, управляемая через `db.session()`.
    """
    async with db.session() as session:
        yield session
