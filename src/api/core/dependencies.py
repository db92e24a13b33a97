"""Зависимости FastAPI: сессия БД, репозитории, сервисы и текущий пользователь."""

from typing import Annotated

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.models import CheckIn, Goal, GoalHabit, Habit, User
from src.api.repositories import (
    CheckInRepository,
    GoalHabitRepository,
    GoalRepository,
    HabitRepository,
    UserRepository,
)
from src.api.services import SyncService

from .database import get_db_session
from .exceptions import UnauthorizedException
from .logging import api_log as log
from .security import verify_and_decode_token

# --- Типизация для инъекции зависимостей ---

# Сессия базы данных
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# --- Фабрики Репозиториев ---


def get_user_repository() -> UserRepository:
    return UserRepository(User)


def get_habit_repository() -> HabitRepository:
    return HabitRepository(Habit)


def get_check_in_repository() -> CheckInRepository:
    return CheckInRepository(CheckIn)


def get_goal_repository() -> GoalRepository:
    return GoalRepository(Goal)


def get_goal_habit_repository() -> GoalHabitRepository:
    return GoalHabitRepository(GoalHabit)


# Типизация для репозиториев
UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
HabitRepo = Annotated[HabitRepository, Depends(get_habit_repository)]
CheckInRepo = Annotated[CheckInRepository, Depends(get_check_in_repository)]
GoalRepo = Annotated[GoalRepository, Depends(get_goal_repository)]
GoalHabitRepo = Annotated[GoalHabitRepository, Depends(get_goal_habit_repository)]


# --- Фабрики Сервисов ---


# SyncService работает со всеми сущностями снимка
def get_sync_service(
    user_repository: UserRepo,
    habit_repository: HabitRepo,
    check_in_repository: CheckInRepo,
    goal_repository: GoalRepo,
    goal_habit_repository: GoalHabitRepo,
) -> SyncService:
    return SyncService(
        user_repository=user_repository,
        habit_repository=habit_repository,
        check_in_repository=check_in_repository,
        goal_repository=goal_repository,
        goal_habit_repository=goal_habit_repository,
    )


# Типизация для сервисов
SyncSvc = Annotated[SyncService, Depends(get_sync_service)]


# --- Зависимость для получения текущего пользователя ---

# Схема для JWT Bearer токена
bearer_schema = HTTPBearer(auto_error=False)


async def get_current_user(
    db_session: DBSession,
    user_repo: UserRepo,
    token_credentials: HTTPAuthorizationCredentials | None = Security(bearer_schema),
) -> User:
    """
    Получает текущего аутентифицированного пользователя на основе JWT токена.

    Args:
        db_session (AsyncSession): Асинхронная сессия базы данных.
        user_repo (UserRepo): Экземпляр репозитория пользователей.
        token_credentials (HTTPAuthorizationCredentials | None): Учетные данные из заголовка Authorization.

    Returns:
        User: Экземпляр модели текущего пользователя.

    Raises:
        UnauthorizedException: Если токен отсутствует, невалиден или пользователь не найден.
    """
    if token_credentials is None or not token_credentials.credentials:
        log.debug("Отсутствует токен авторизации.")
        raise UnauthorizedException(message="Токен авторизации не предоставлен.")

    # UnauthorizedException будет выброшен из verify_and_decode_token в случае проблем
    token_payload = verify_and_decode_token(token_credentials.credentials)

    user = await user_repo.get_by_id(db_session, obj_id=token_payload.user_id)

    if user is None:
        log.warning(f"Пользователь с ID {token_payload.user_id} из токена не найден в БД.")
        raise UnauthorizedException(message="Пользователь не найден.", error_type="token_user_not_found")

    log.debug(f"Аутентифицирован пользователь: ID {user.id}, провайдер {user.provider.value}")
    return user


# --- Типизация для инъекции текущего пользователя ---
CurrentUser = Annotated[User, Depends(get_current_user)]
