"""Инициализация модуля репозиториев."""

from .base_repository import BaseRepository
from .check_in_repository import CheckInRepository
from .goal_habit_repository import GoalHabitRepository
from .goal_repository import GoalRepository
from .habit_repository import HabitRepository
from .merge_policy import MergePolicy
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "MergePolicy",
    "UserRepository",
    "HabitRepository",
    "CheckInRepository",
    "GoalRepository",
    "GoalHabitRepository",
]
