"""Правила слияния записей при повторной загрузке одних и тех же данных (upsert)."""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, Table, func


@dataclass(frozen=True)
class MergePolicy:
    """
    Описывает, как входящая запись сливается с уже сохраненной.

    Attributes:
        natural_key: Колонки, по которым определяется "та же самая" запись (ON CONFLICT).
        overwrite_fields: Поля, которые всегда перезаписываются входящим значением.
        keep_existing_when_null_fields: Поля, которые перезаписываются, только если
                                        входящее значение не NULL (иначе сохраняется старое).

    Поля, не попавшие ни в один из списков, при конфликте не изменяются.
    """

    natural_key: tuple[str, ...]
    overwrite_fields: tuple[str, ...] = ()
    keep_existing_when_null_fields: tuple[str, ...] = ()

    def build_set_clause(self, excluded: Any, table: Table) -> dict[str, ColumnElement[Any]]:
        """
        Строит SET-часть для ON CONFLICT DO UPDATE.

        Args:
            excluded: Псевдотаблица EXCLUDED из insert-выражения диалекта.
            table (Table): Целевая таблица.

        Returns:
            dict[str, ColumnElement[Any]]: Отображение "колонка -> новое значение".
        """
        set_clause: dict[str, ColumnElement[Any]] = {field: excluded[field] for field in self.overwrite_fields}

        for field in self.keep_existing_when_null_fields:
            set_clause[field] = func.coalesce(excluded[field], table.c[field])

        return set_clause
