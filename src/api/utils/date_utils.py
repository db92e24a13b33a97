"""Модуль вспомогательных утилит для работы с датами."""

import re
from datetime import date, datetime, timezone

from src.api.core.exceptions import BadRequestException
from src.api.core.logging import api_log as log

# Строго YYYY-MM-DD, без времени и смещения
CALENDAR_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_calendar_date(raw_value: str, *, loc: list[str | int] | None = None) -> date:
    """
    Разбирает календарную дату в формате YYYY-MM-DD.

    Args:
        raw_value (str): Строка с датой.
        loc (list[str | int] | None): Путь к полю в теле запроса (для сообщения об ошибке).

    Returns:
        date: Разобранная дата.

    Raises:
        BadRequestException: Если строка не соответствует формату или дата не существует.
    """
    if CALENDAR_DATE_PATTERN.fullmatch(raw_value):
        try:
            return date.fromisoformat(raw_value)
        except ValueError:
            # Формат верный, но такой даты нет (например, 2024-02-30)
            pass

    log.warning(f"Некорректная календарная дата '{raw_value}' (поле: {loc}).")
    raise BadRequestException(
        message=f"Некорректная дата '{raw_value}', ожидается формат YYYY-MM-DD.",
        error_type="invalid_date",
        loc=loc,
    )


def as_utc(value: datetime) -> datetime:
    """
    Приводит момент времени к UTC.

    Значение без часового пояса считается уже записанным в UTC
    (так его возвращают хранилища без поддержки смещений, например SQLite).

    Args:
        value (datetime): Момент времени.

    Returns:
        datetime: Тот же момент времени с часовым поясом UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
