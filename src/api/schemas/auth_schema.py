"""Схемы Pydantic для аутентификации."""

import uuid

from pydantic import BaseModel, Field


class TokenPayload(BaseModel):
    """
    Схема для данных (payload), закодированных в JWT.
    Содержит ID пользователя и время истечения (exp).
    """

    user_id: uuid.UUID = Field(..., description="ID пользователя (внутренний)")
    exp: int | None = Field(None, description="Время истечения токена (Unix timestamp)")
