"""Базовое определение модели для SQLAlchemy."""

import uuid
from datetime import datetime
from enum import Enum as PyEnum  # Чтобы не конфликтовать с sqlalchemy.Enum

from sqlalchemy import DateTime, MetaData, Uuid, func
from sqlalchemy import Enum as SqlEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Соглашение об именовании для внешних ключей и индексов (для Alembic и SQLAlchemy)
# https://alembic.sqlalchemy.org/en/latest/naming.html
# https://docs.sqlalchemy.org/en/20/core/constraints.html#constraint-naming-conventions
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata_obj = MetaData(naming_convention=convention)


def enum_type(enum_cls: type[PyEnum], name: str) -> SqlEnum:
    """
    Создает тип колонки для Python Enum, хранящий в БД значения (value), а не имена членов.

    Значения совпадают с метками, которые клиенты передают в снимках синхронизации
    (например, "at_least"), поэтому в БД и на проводе используется одна и та же строка.

    Args:
        enum_cls: Класс перечисления.
        name: Имя типа ENUM в PostgreSQL.
    """
    return SqlEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


class CreatedAtMixin:
    """
    Миксин для добавления поля created_at.

    Значение по умолчанию выставляет БД, но синхронизация передает его явно
    (время создания записи на устройстве клиента).
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        comment="Время создания записи",
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """
    Миксин для добавления полей created_at и updated_at к моделям.

    Attributes:
        created_at: Время создания записи.
        updated_at: Время последнего обновления записи (обновляется при ORM-изменениях).
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        comment="Время последнего обновления записи",
        nullable=False,
    )


class Base(DeclarativeBase):
    """
    Базовый класс для декларативных моделей SQLAlchemy.

    Предоставляет:
    - Стандартный __repr__.
    - Общий первичный ключ 'id' (UUID, генерируется сервером приложения).
    - Настроенный metadata.
    """

    metadata = metadata_obj  # Применение соглашения об именовании

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    def __repr__(self) -> str:
        """
        Возвращает строковое представление объекта модели.

        Пример: <Habit(id=UUID('...'))>
        """
        return f"<{self.__class__.__name__}(id={self.id!r})>"
