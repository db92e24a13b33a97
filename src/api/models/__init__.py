from .base import Base, metadata_obj
from .check_in import CheckIn
from .goal import Goal, GoalStatus
from .goal_habit import GoalHabit
from .habit import Habit, HabitType, TargetDirection
from .user import AuthProvider, User

__all__ = [
    "metadata_obj",
    "Base",
    "AuthProvider",
    "User",
    "Habit",
    "HabitType",
    "TargetDirection",
    "CheckIn",
    "Goal",
    "GoalStatus",
    "GoalHabit",
]
