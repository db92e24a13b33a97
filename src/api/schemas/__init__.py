"""Инициализация модуля схем Pydantic."""

# Экспортируем Enum
from src.api.models import GoalStatus, HabitType, TargetDirection

from .auth_schema import TokenPayload
from .base_schema import BaseSchema, CamelSchema
from .sync_schema import (
    CheckInSyncSchema,
    CloudSyncResponseSchema,
    GoalHabitSyncSchema,
    GoalSyncSchema,
    HabitSyncSchema,
    SyncResultSchema,
    SyncSnapshotSchema,
    SyncStatusSchema,
)

__all__ = [
    "BaseSchema",
    "CamelSchema",
    "TokenPayload",
    "HabitSyncSchema",
    "CheckInSyncSchema",
    "GoalSyncSchema",
    "GoalHabitSyncSchema",
    "SyncSnapshotSchema",
    "SyncResultSchema",
    "SyncStatusSchema",
    "CloudSyncResponseSchema",
    "HabitType",  # Экспорт Enum
    "TargetDirection",  # Экспорт Enum
    "GoalStatus",  # Экспорт Enum
]
