"""Репозиторий для работы с моделью Habit."""

import uuid
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import Habit

from .base_repository import BaseRepository
from .merge_policy import MergePolicy


class HabitRepository(BaseRepository[Habit]):
    """
    Репозиторий для работы с моделью Habit.

    Привычки сливаются по ID. Тип привычки (habit_type) после создания не меняется.
    """

    merge_policy = MergePolicy(
        natural_key=("id",),
        overwrite_fields=(
            "name",
            "description",
            "unit",
            "target_value",
            "target_direction",
            "archived",
            "updated_at",
        ),
    )

    async def get_habits_by_user_id(self, db_session: AsyncSession, *, user_id: uuid.UUID) -> Sequence[Habit]:
        """
        Получает все привычки пользователя в порядке создания.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            user_id (uuid.UUID): ID пользователя.

        Returns:
            Sequence[Habit]: Список привычек пользователя.
        """
        habits = await self.get_multi_by_filter(
            db_session,
            self.model.user_id == user_id,
            order_by=[self.model.created_at.asc()],
        )
        log.debug(f"Найдено {len(habits)} привычек пользователя ID {user_id}.")
        return habits

    async def count_by_user_id(self, db_session: AsyncSession, *, user_id: uuid.UUID) -> int:
        """Возвращает количество привычек пользователя."""
        return await self.count_by_filter(db_session, self.model.user_id == user_id)
