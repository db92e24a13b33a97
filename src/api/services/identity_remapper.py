"""Сопоставление локальных идентификаторов устройства с каноническими ID на сервере."""

import uuid

from src.api.core.logging import api_log as log


class IdentityRemapper:
    """
    Словарь "локальный ID -> канонический ID" в пределах одной загрузки снимка.

    Локальные ID создаются устройством и имеют смысл только внутри снимка,
    поэтому ссылки отметок и связей на родительские записи разрешаются только через этот словарь.
    Экземпляр создается на каждую загрузку и не сохраняется между запросами.

    Attributes:
        misses (int): Количество неразрешенных ссылок (для диагностики).
    """

    def __init__(self) -> None:
        self._habit_ids: dict[str, uuid.UUID] = {}
        self._goal_ids: dict[str, uuid.UUID] = {}
        self.misses = 0

    def register_habit(self, local_id: str, canonical_id: uuid.UUID) -> None:
        """Запоминает канонический ID привычки. Повторная регистрация того же local_id заменяет прежнюю."""
        self._register(self._habit_ids, "привычки", local_id, canonical_id)

    def register_goal(self, local_id: str, canonical_id: uuid.UUID) -> None:
        """Запоминает канонический ID цели. Повторная регистрация того же local_id заменяет прежнюю."""
        self._register(self._goal_ids, "цели", local_id, canonical_id)

    def resolve_habit(self, local_id: str) -> uuid.UUID | None:
        """Возвращает канонический ID привычки или None, если привычка в снимке не встречалась."""
        return self._resolve(self._habit_ids, local_id)

    def resolve_goal(self, local_id: str) -> uuid.UUID | None:
        """Возвращает канонический ID цели или None, если цель в снимке не встречалась."""
        return self._resolve(self._goal_ids, local_id)

    @staticmethod
    def _register(mapping: dict[str, uuid.UUID], scope: str, local_id: str, canonical_id: uuid.UUID) -> None:
        if local_id in mapping:
            log.debug(f"Локальный ID {scope} '{local_id}' встречается в снимке повторно, используется последний.")

        mapping[local_id] = canonical_id

    def _resolve(self, mapping: dict[str, uuid.UUID], local_id: str) -> uuid.UUID | None:
        canonical_id = mapping.get(local_id)

        if canonical_id is None:
            self.misses += 1

        return canonical_id
