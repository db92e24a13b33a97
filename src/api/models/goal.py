"""Модель SQLAlchemy для Goal (Цель)."""

import uuid
from datetime import date
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, enum_type

if TYPE_CHECKING:  # pragma: no cover
    from .goal_habit import GoalHabit
    from .user import User


class GoalStatus(PyEnum):
    """Статусы цели."""

    ACTIVE = "active"
    ACHIEVED = "achieved"
    FAILED = "failed"
    ABANDONED = "abandoned"


class Goal(Base, TimestampMixin):
    """
    Представляет цель пользователя, к которой ведут одна или несколько привычек.

    Attributes:
        id: Первичный ключ (унаследован от Base).
        user_id: Внешний ключ владельца цели.
        name: Название цели.
        description: Описание цели (опционально).
        deadline: Крайний срок (календарная дата).
        status: Статус цели.
        is_shared: Флаг, открыт ли к цели совместный доступ (управляется сервисом шаринга).
        user: Связь с владельцем.
        habit_links: Связи цели с привычками.
    """

    __tablename__ = "goals"

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    deadline: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[GoalStatus] = mapped_column(
        enum_type(GoalStatus, "goal_status"),
        default=GoalStatus.ACTIVE,
        nullable=False,
    )
    is_shared: Mapped[bool] = mapped_column(default=False, nullable=False)

    # Связи
    user: Mapped["User"] = relationship(back_populates="goals")
    habit_links: Mapped[list["GoalHabit"]] = relationship(back_populates="goal", cascade="all, delete-orphan")
