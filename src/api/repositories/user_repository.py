"""Репозиторий для работы с моделью User."""

import uuid
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import User

from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """
    Репозиторий для работы с моделью User.

    Наследует общие методы от BaseRepository и содержит специфичные для User методы.
    Пользователей создает сервис аутентификации, поэтому upsert здесь не поддерживается.
    """

    async def mark_synced(self, db_session: AsyncSession, *, user_id: uuid.UUID, synced_at: datetime) -> None:
        """
        Записывает время последней успешной загрузки данных пользователя.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            user_id (uuid.UUID): ID пользователя.
            synced_at (datetime): Время завершения синхронизации.
        """
        log.debug(f"Обновление last_synced_at пользователя ID {user_id}: {synced_at.isoformat()}")
        statement = update(self.model).where(self.model.id == user_id).values(last_synced_at=synced_at)
        await db_session.execute(statement)
