"""Репозиторий для работы с моделью GoalHabit."""

import uuid
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import Goal, GoalHabit

from .base_repository import BaseRepository
from .merge_policy import MergePolicy


class GoalHabitRepository(BaseRepository[GoalHabit]):
    """
    Репозиторий для работы со связями целей и привычек.

    Связи сливаются по паре (цель, привычка), перезаписывается только вес.
    """

    merge_policy = MergePolicy(
        natural_key=("goal_id", "habit_id"),
        overwrite_fields=("weight",),
    )

    async def get_links_by_user_id(self, db_session: AsyncSession, *, user_id: uuid.UUID) -> Sequence[GoalHabit]:
        """
        Получает все связи целей пользователя с привычками.

        У связи нет собственного владельца, поэтому принадлежность определяется через цель.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            user_id (uuid.UUID): ID пользователя.

        Returns:
            Sequence[GoalHabit]: Список связей.
        """
        statement = (
            select(self.model)
            .join(Goal, Goal.id == self.model.goal_id)
            .where(Goal.user_id == user_id)
            .order_by(Goal.created_at.asc(), self.model.habit_id.asc())
        )
        result = await db_session.execute(statement)
        links = result.scalars().all()

        log.debug(f"Найдено {len(links)} связей целей с привычками пользователя ID {user_id}.")
        return links
