"""Модель SQLAlchemy для User (Пользователь)."""

from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, enum_type

if TYPE_CHECKING:  # pragma: no cover
    from .goal import Goal
    from .habit import Habit


class AuthProvider(PyEnum):
    """Провайдеры OAuth, через которые пользователь вошел в приложение."""

    GOOGLE = "google"
    APPLE = "apple"


class User(Base, TimestampMixin):
    """
    Представляет пользователя приложения.

    Учетная запись создается внешним сервисом аутентификации (OAuth),
    синхронизация только читает флаг `cloud_sync_enabled` и отмечает время последней синхронизации.

    Attributes:
        id: Первичный ключ, внутренний идентификатор пользователя (унаследован от Base).
        email: Email пользователя у OAuth-провайдера.
        name: Отображаемое имя (может быть None).
        avatar_url: Ссылка на аватар (может быть None).
        provider: OAuth-провайдер.
        provider_id: Идентификатор пользователя у провайдера.
        cloud_sync_enabled: Флаг, разрешил ли пользователь хранение данных в облаке.
        last_synced_at: Время последней успешной загрузки данных (push) на сервер.
        habits: Привычки пользователя.
        goals: Цели пользователя.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255))
    avatar_url: Mapped[str | None] = mapped_column(Text)
    provider: Mapped[AuthProvider] = mapped_column(enum_type(AuthProvider, "auth_provider"), nullable=False)
    provider_id: Mapped[str] = mapped_column(String(255), nullable=False)
    cloud_sync_enabled: Mapped[bool] = mapped_column(default=False, nullable=False)
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Связи
    habits: Mapped[list["Habit"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    goals: Mapped[list["Goal"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    # Один аккаунт на пару (провайдер, ID у провайдера)
    __table_args__ = (UniqueConstraint("provider", "provider_id", name="uq_users_provider_provider_id"),)
