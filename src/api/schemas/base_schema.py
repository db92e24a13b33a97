"""Базовые конфигурации и схемы для Pydantic."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Базовая схема Pydantic с общей конфигурацией."""

    model_config = ConfigDict(
        from_attributes=True,  # Позволяет создавать схемы из ORM моделей
        populate_by_name=True,  # Позволяет использовать alias для полей
        extra="ignore",  # Игнорировать лишние поля при парсинге
    )


class CamelSchema(BaseSchema):
    """
    Базовая схема для обмена с клиентами: поля в camelCase на проводе.

    Благодаря populate_by_name принимаются и snake_case имена.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        extra="ignore",
        alias_generator=to_camel,
    )
