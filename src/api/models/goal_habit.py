"""Модель SQLAlchemy для GoalHabit (Связь цели и привычки)."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:  # pragma: no cover
    from .goal import Goal
    from .habit import Habit


class GoalHabit(Base):
    """
    Связывает цель с привычкой и задает вклад привычки в прогресс цели.

    Attributes:
        id: Первичный ключ (унаследован от Base).
        goal_id: Внешний ключ цели.
        habit_id: Внешний ключ привычки.
        weight: Вес привычки в прогрессе цели.
        goal: Связь с целью.
        habit: Связь с привычкой.
    """

    __tablename__ = "goal_habits"

    goal_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    habit_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    weight: Mapped[float] = mapped_column(Float, default=1.0, server_default="1.0", nullable=False)

    # Связи
    goal: Mapped["Goal"] = relationship(back_populates="habit_links")
    habit: Mapped["Habit"] = relationship()

    # Естественный ключ: одна связь на пару (цель, привычка)
    __table_args__ = (UniqueConstraint("goal_id", "habit_id", name="uq_goal_habits_goal_id_habit_id"),)
