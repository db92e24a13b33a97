"""Базовый репозиторий с общими операциями чтения, обновления и слияния (upsert)."""

from typing import Any, Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy import ColumnElement, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import Base as SQLAlchemyBaseModel

from .merge_policy import MergePolicy

# Определяем обобщенный (Generic) тип для моделей SQLAlchemy
ModelType = TypeVar("ModelType", bound=SQLAlchemyBaseModel)  # SQLAlchemy модель

# Конструкторы INSERT с поддержкой ON CONFLICT по имени диалекта
UPSERT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BaseRepository(Generic[ModelType]):
    """
    Базовый класс репозитория для асинхронных операций с БД.

    Предоставляет общие методы чтения, подсчета, обновления и слияния записей.
    Репозитории, поддерживающие upsert, задают атрибут класса `merge_policy`.

    Attributes:
        model: Класс модели SQLAlchemy, с которым работает репозиторий.
        merge_policy: Правило слияния для upsert (None, если upsert не поддерживается).
    """

    merge_policy: MergePolicy | None = None

    def __init__(self, model: type[ModelType]):
        """
        Инициализирует базовый репозиторий.

        Args:
            model (ModelType): Класс модели SQLAlchemy.
        """
        self.model = model

    async def get_by_id(self, db_session: AsyncSession, *, obj_id: Any) -> ModelType | None:
        """
        Получает одну запись по ее ID.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            obj_id (Any): Идентификатор записи (UUID).

        Returns:
            ModelType | None: Экземпляр модели или None, если запись не найдена.
        """
        model_name = self.model.__name__

        log.debug(f"Получение записи {model_name} по ID: {obj_id}")
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db_session.execute(statement)
        instance = result.scalar_one_or_none()

        status = "найдена" if instance else "не найдена"
        log.debug(f"Запись {model_name} с ID {obj_id} {status}.")

        return instance

    async def get_multi_by_filter(
        self,
        db_session: AsyncSession,
        *filters: ColumnElement[bool],
        order_by: list[ColumnElement[Any]] | None = None,
    ) -> Sequence[ModelType]:
        """
        Получает все записи, соответствующие заданным критериям фильтрации,
        с опциональной сортировкой.

        Выгрузка при синхронизации должна быть полной, поэтому пагинации нет.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            *filters (ColumnElement[bool]): Критерии фильтрации SQLAlchemy.
            order_by (list[ColumnElement[Any]] | None): Список полей для сортировки
                                                       (например, [self.model.created_at.asc()]).

        Returns:
            Sequence[ModelType]: Список экземпляров модели.
        """
        statement = select(self.model)

        if filters:
            statement = statement.where(*filters)

        if order_by:
            statement = statement.order_by(*order_by)

        result = await db_session.execute(statement)
        return result.scalars().all()

    async def count_by_filter(self, db_session: AsyncSession, *filters: ColumnElement[bool]) -> int:
        """
        Считает количество записей, соответствующих критериям фильтрации.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            *filters (ColumnElement[bool]): Критерии фильтрации SQLAlchemy.

        Returns:
            int: Количество записей.
        """
        statement = select(func.count()).select_from(self.model)

        if filters:
            statement = statement.where(*filters)

        result = await db_session.execute(statement)
        return result.scalar_one()

    async def update(
        self,
        db_session: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: BaseModel | dict[str, Any],
    ) -> ModelType:
        """
        Обновляет существующую запись в базе данных.

        Args:
            db_session  (AsyncSession): Асинхронная сессия базы данных.
            db_obj (ModelType): Экземпляр модели SQLAlchemy для обновления.
            obj_in (BaseModel | dict[str, Any]): Схема Pydantic с данными для обновления или словарь.

        Returns:
            ModelType: Обновленный экземпляр модели.
        """
        model_name = self.model.__name__

        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)  # exclude_unset=True для частичного обновления

        # Обновляем поля модели
        for field, value in update_data.items():
            if hasattr(db_obj.__class__, field):
                setattr(db_obj, field, value)
            else:
                log.warning(f"Попытка обновить несуществующее поле '{field}' для {model_name} ID: {db_obj.id}")

        db_session.add(db_obj)

        # Отправляем изменения и перечитываем значения, сгенерированные БД
        await db_session.flush()
        await db_session.refresh(db_obj)

        log.info(f"{model_name} с ID: {db_obj.id} успешно обновлен.")

        return db_obj

    async def upsert(self, db_session: AsyncSession, *, values: dict[str, Any]) -> None:
        """
        Вставляет запись или сливает ее с существующей по правилу `merge_policy`.

        Выполняется одним выражением INSERT ... ON CONFLICT DO UPDATE, поэтому
        повторная загрузка той же записи не создает дубликатов даже при
        конкурентных вставках.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            values (dict[str, Any]): Значения колонок новой записи.

        Raises:
            RuntimeError: Если у репозитория нет правила слияния или диалект БД не поддерживается.
        """
        model_name = self.model.__name__
        policy = self.merge_policy

        if policy is None:
            raise RuntimeError(f"Для {model_name} не задано правило слияния (merge_policy).")

        dialect_name = db_session.get_bind().dialect.name
        insert_factory = UPSERT_INSERTS.get(dialect_name)

        if insert_factory is None:
            raise RuntimeError(f"Диалект БД '{dialect_name}' не поддерживает upsert.")

        table = self.model.__table__
        statement = insert_factory(table).values(**values)
        statement = statement.on_conflict_do_update(
            index_elements=list(policy.natural_key),
            set_=policy.build_set_clause(statement.excluded, table),
        )

        log.debug(f"Upsert записи {model_name} по ключу {policy.natural_key}.")
        await db_session.execute(statement)
