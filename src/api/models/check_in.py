"""Модель SQLAlchemy для CheckIn (Отметка выполнения привычки)."""

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin

if TYPE_CHECKING:  # pragma: no cover
    from .habit import Habit


class CheckIn(Base, CreatedAtMixin):
    """
    Представляет отметку выполнения привычки за конкретный день.

    Attributes:
        id: Первичный ключ (унаследован от Base).
        habit_id: Внешний ключ, связывающий отметку с привычкой.
        user_id: Внешний ключ владельца (дублируется для выборок по пользователю без JOIN).
        value: Значение отметки (1/0 для бинарных привычек, число для числовых).
        note: Заметка к отметке (опционально).
        effective_date: Календарная дата, к которой относится отметка.
        created_at: Время создания записи (унаследовано от CreatedAtMixin).
        habit: Связь с привычкой.
    """

    __tablename__ = "check_ins"

    habit_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(Text)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Связи
    habit: Mapped["Habit"] = relationship(back_populates="check_ins")

    # Естественный ключ: не более одной отметки на привычку в день
    __table_args__ = (UniqueConstraint("habit_id", "effective_date", name="uq_check_ins_habit_id_effective_date"),)
