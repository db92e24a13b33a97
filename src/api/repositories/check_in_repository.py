"""Репозиторий для работы с моделью CheckIn."""

import uuid
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import CheckIn

from .base_repository import BaseRepository
from .merge_policy import MergePolicy


class CheckInRepository(BaseRepository[CheckIn]):
    """
    Репозиторий для работы с моделью CheckIn.

    Отметки сливаются по паре (привычка, дата): значение перезаписывается,
    а заметка сохраняется, если новая не передана.
    """

    merge_policy = MergePolicy(
        natural_key=("habit_id", "effective_date"),
        overwrite_fields=("value",),
        keep_existing_when_null_fields=("note",),
    )

    async def get_check_ins_by_user_id(self, db_session: AsyncSession, *, user_id: uuid.UUID) -> Sequence[CheckIn]:
        """
        Получает все отметки пользователя, упорядоченные по дате.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            user_id (uuid.UUID): ID пользователя.

        Returns:
            Sequence[CheckIn]: Список отметок пользователя.
        """
        check_ins = await self.get_multi_by_filter(
            db_session,
            self.model.user_id == user_id,
            order_by=[self.model.effective_date.asc()],
        )
        log.debug(f"Найдено {len(check_ins)} отметок пользователя ID {user_id}.")
        return check_ins

    async def count_by_user_id(self, db_session: AsyncSession, *, user_id: uuid.UUID) -> int:
        """Возвращает количество отметок пользователя."""
        return await self.count_by_filter(db_session, self.model.user_id == user_id)
