"""Модель SQLAlchemy для Habit (Привычка)."""

import uuid
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, enum_type

if TYPE_CHECKING:  # pragma: no cover
    from .check_in import CheckIn
    from .user import User


class HabitType(PyEnum):
    """Тип привычки."""

    BINARY = "binary"  # Выполнено / не выполнено
    NUMERIC = "numeric"  # Числовое значение (стаканы воды, минуты и т.д.)


class TargetDirection(PyEnum):
    """Как сравнивать значение отметки с целевым значением привычки."""

    AT_LEAST = "at_least"
    AT_MOST = "at_most"
    EXACTLY = "exactly"


class Habit(Base, TimestampMixin):
    """
    Представляет привычку пользователя.

    Attributes:
        id: Первичный ключ, канонический идентификатор привычки (унаследован от Base).
        user_id: Внешний ключ, связывающий привычку с пользователем.
        name: Название привычки.
        description: Описание привычки (опционально).
        habit_type: Тип привычки (бинарная или числовая).
        unit: Единица измерения для числовых привычек (опционально).
        target_value: Целевое значение (опционально).
        target_direction: Направление сравнения с целевым значением.
        archived: Флаг, перенесена ли привычка в архив.
        created_at: Время создания записи (унаследовано от TimestampMixin).
        updated_at: Время последнего обновления записи (унаследовано от TimestampMixin).
        user: Связь с пользователем, которому принадлежит привычка.
        check_ins: Отметки выполнения этой привычки.
    """

    __tablename__ = "habits"

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    habit_type: Mapped[HabitType] = mapped_column(
        enum_type(HabitType, "habit_type"),
        default=HabitType.BINARY,
        nullable=False,
    )
    unit: Mapped[str | None] = mapped_column(String(50))
    target_value: Mapped[int | None] = mapped_column(Integer)
    target_direction: Mapped[TargetDirection] = mapped_column(
        enum_type(TargetDirection, "target_direction"),
        default=TargetDirection.AT_LEAST,
        nullable=False,
    )
    archived: Mapped[bool] = mapped_column(default=False, nullable=False)

    # Связи
    user: Mapped["User"] = relationship(back_populates="habits")
    check_ins: Mapped[list["CheckIn"]] = relationship(back_populates="habit", cascade="all, delete-orphan")
