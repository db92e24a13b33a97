"""Репозиторий для работы с моделью Goal."""

import uuid
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import Goal

from .base_repository import BaseRepository
from .merge_policy import MergePolicy


class GoalRepository(BaseRepository[Goal]):
    """
    Репозиторий для работы с моделью Goal.

    Цели сливаются по ID. Флаг совместного доступа (is_shared) синхронизацией не меняется.
    """

    merge_policy = MergePolicy(
        natural_key=("id",),
        overwrite_fields=("name", "description", "deadline", "status", "updated_at"),
    )

    async def get_goals_by_user_id(self, db_session: AsyncSession, *, user_id: uuid.UUID) -> Sequence[Goal]:
        """
        Получает все цели пользователя в порядке создания.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            user_id (uuid.UUID): ID пользователя.

        Returns:
            Sequence[Goal]: Список целей пользователя.
        """
        goals = await self.get_multi_by_filter(
            db_session,
            self.model.user_id == user_id,
            order_by=[self.model.created_at.asc()],
        )
        log.debug(f"Найдено {len(goals)} целей пользователя ID {user_id}.")
        return goals

    async def count_by_user_id(self, db_session: AsyncSession, *, user_id: uuid.UUID) -> int:
        """Возвращает количество целей пользователя."""
        return await self.count_by_filter(db_session, self.model.user_id == user_id)
