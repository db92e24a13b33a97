"""
Исключения API и их обработчики.

Все прикладные исключения наследуются от `BaseAPIException` и превращаются
в JSON-ответ единого формата:

    {"detail": [{"type": "<error_type>", "msg": "<message>", "loc": [...]}]}

Формат совпадает с ответом FastAPI на ошибки валидации, поэтому клиенту
достаточно одного парсера ошибок.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .logging import api_log as log


class BaseAPIException(Exception):
    """
    Базовое исключение API.

    Attributes:
        status_code (int): HTTP статус ответа.
        message (str): Сообщение для клиента.
        error_type (str): Машиночитаемый тип ошибки.
        loc (list[str | int] | None): Место возникновения ошибки (например, ["body", "checkIns", "0"]).
        headers (dict[str, str] | None): Дополнительные заголовки ответа.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Внутренняя ошибка сервера."
    default_error_type: str = "internal_error"

    def __init__(
        self,
        message: str | None = None,
        error_type: str | None = None,
        loc: list[str | int] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message or self.default_message
        self.error_type = error_type or self.default_error_type
        self.loc = loc
        self.headers = headers
        super().__init__(self.message)

    def to_detail(self) -> dict[str, Any]:
        """Формирует элемент списка `detail` для тела ответа."""
        detail: dict[str, Any] = {"type": self.error_type, "msg": self.message}

        if self.loc:
            detail["loc"] = self.loc

        return detail


class BadRequestException(BaseAPIException):
    """Некорректный запрос (400)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Некорректный запрос."
    default_error_type = "bad_request"


class UnauthorizedException(BaseAPIException):
    """Отсутствует или невалидна аутентификация (401)."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Требуется аутентификация."
    default_error_type = "unauthorized"

    def __init__(
        self,
        message: str | None = None,
        error_type: str | None = None,
        loc: list[str | int] | None = None,
    ):
        super().__init__(message, error_type, loc, headers={"WWW-Authenticate": "Bearer"})


class StoreFailureException(BaseAPIException):
    """
    Ошибка хранилища данных (500).

    Текст исходной ошибки клиенту не передается, он только логируется.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Ошибка базы данных."
    default_error_type = "store_failure"


async def api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    """Преобразует прикладное исключение в JSON-ответ."""
    log.debug(f"{request.method} {request.url.path} -> {exc.status_code} ({exc.error_type}): {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": [exc.to_detail()]},
        headers=exc.headers,
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Обрабатывает ошибки SQLAlchemy, не перехваченные сервисами.

    Детали ошибки пишутся в лог, клиент получает обезличенное сообщение.
    """
    log.opt(exception=exc).error(f"Необработанная ошибка БД при запросе {request.method} {request.url.path}")

    return await api_exception_handler(request, StoreFailureException())


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Регистрирует обработчики исключений в приложении.

    Args:
        app (FastAPI): Экземпляр приложения FastAPI.
    """
    app.add_exception_handler(BaseAPIException, api_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)  # type: ignore[arg-type]
