"""Схемы Pydantic для синхронизации данных устройства с облаком."""

from datetime import datetime

from pydantic import AwareDatetime, Field

from src.api.models import GoalStatus, HabitType, TargetDirection

from .base_schema import CamelSchema

# Границы колонки Integer (32 бита)
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Моменты времени принимаются только со смещением часового пояса.
# Календарные даты (effectiveDate, deadline) принимаются строками и разбираются
# внутри транзакции загрузки: некорректная дата откатывает всю загрузку целиком.


class HabitSyncSchema(CamelSchema):
    """Привычка в снимке синхронизации."""

    local_id: str = Field(..., min_length=1, description="Идентификатор привычки на устройстве")
    name: str = Field(..., min_length=1, max_length=255, description="Название привычки")
    description: str | None = Field(None, description="Описание привычки")
    habit_type: HabitType = Field(..., description="Тип привычки")
    unit: str | None = Field(None, max_length=50, description="Единица измерения")
    target_value: int | None = Field(None, ge=INT32_MIN, le=INT32_MAX, description="Целевое значение")
    target_direction: TargetDirection = Field(..., description="Направление сравнения с целью")
    archived: bool = Field(False, description="Привычка в архиве")
    created_at: AwareDatetime = Field(..., description="Время создания на устройстве")
    updated_at: AwareDatetime = Field(..., description="Время последнего изменения на устройстве")


class CheckInSyncSchema(CamelSchema):
    """Отметка выполнения привычки в снимке синхронизации."""

    local_id: str = Field(..., min_length=1, description="Идентификатор отметки на устройстве")
    habit_local_id: str = Field(..., min_length=1, description="Идентификатор привычки на устройстве")
    value: int = Field(..., ge=INT32_MIN, le=INT32_MAX, description="Значение отметки")
    note: str | None = Field(None, description="Заметка")
    effective_date: str = Field(..., description="Дата отметки (YYYY-MM-DD)")
    created_at: AwareDatetime = Field(..., description="Время создания на устройстве")


class GoalSyncSchema(CamelSchema):
    """Цель в снимке синхронизации."""

    local_id: str = Field(..., min_length=1, description="Идентификатор цели на устройстве")
    name: str = Field(..., min_length=1, max_length=255, description="Название цели")
    description: str | None = Field(None, description="Описание цели")
    deadline: str = Field(..., description="Крайний срок (YYYY-MM-DD)")
    status: GoalStatus = Field(..., description="Статус цели")
    created_at: AwareDatetime = Field(..., description="Время создания на устройстве")
    updated_at: AwareDatetime = Field(..., description="Время последнего изменения на устройстве")


class GoalHabitSyncSchema(CamelSchema):
    """Связь цели с привычкой в снимке синхронизации."""

    goal_local_id: str = Field(..., min_length=1, description="Идентификатор цели на устройстве")
    habit_local_id: str = Field(..., min_length=1, description="Идентификатор привычки на устройстве")
    weight: float = Field(1.0, description="Вес привычки в прогрессе цели")


class SyncSnapshotSchema(CamelSchema):
    """Полный снимок данных пользователя (тело загрузки и ответ выгрузки)."""

    habits: list[HabitSyncSchema] = Field(default_factory=list)
    check_ins: list[CheckInSyncSchema] = Field(default_factory=list)
    goals: list[GoalSyncSchema] = Field(default_factory=list)
    goal_habits: list[GoalHabitSyncSchema] = Field(default_factory=list)
    synced_at: AwareDatetime = Field(..., description="Время формирования снимка")


class SyncResultSchema(CamelSchema):
    """Результат загрузки снимка на сервер."""

    success: bool = Field(..., description="Загрузка выполнена")
    synced_habits: int = Field(..., description="Сохранено привычек")
    synced_checkins: int = Field(..., description="Сохранено отметок")
    synced_goals: int = Field(..., description="Сохранено целей")
    synced_at: datetime = Field(..., description="Время завершения загрузки")


class SyncStatusSchema(CamelSchema):
    """Состояние облачной синхронизации пользователя."""

    enabled: bool = Field(..., description="Облачная синхронизация включена")
    last_sync: datetime | None = Field(None, description="Время последней загрузки")
    habits_count: int = Field(..., description="Привычек в облаке")
    checkins_count: int = Field(..., description="Отметок в облаке")
    goals_count: int = Field(..., description="Целей в облаке")


class CloudSyncResponseSchema(CamelSchema):
    """Ответ на включение или отключение облачной синхронизации."""

    enabled: bool = Field(..., description="Новое состояние синхронизации")
    message: str = Field(..., description="Сообщение для пользователя")
