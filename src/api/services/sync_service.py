"""Сервис синхронизации данных устройства с облаком (загрузка и выгрузка снимков)."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.config import settings
from src.api.core.exceptions import BadRequestException, StoreFailureException
from src.api.core.logging import api_log as log
from src.api.models import User
from src.api.repositories import (
    CheckInRepository,
    GoalHabitRepository,
    GoalRepository,
    HabitRepository,
    UserRepository,
)
from src.api.schemas import (
    CheckInSyncSchema,
    CloudSyncResponseSchema,
    GoalHabitSyncSchema,
    GoalSyncSchema,
    HabitSyncSchema,
    SyncResultSchema,
    SyncSnapshotSchema,
    SyncStatusSchema,
)
from src.api.utils.date_utils import as_utc, parse_calendar_date

from .identity_remapper import IdentityRemapper

SYNC_ENABLED_MESSAGE = "Облачная синхронизация включена. Теперь ваши данные надежно сохраняются в облаке."
SYNC_DISABLED_MESSAGE = "Облачная синхронизация отключена. Ваши данные остаются на устройстве."


@dataclass
class PushUnitOfWork:
    """
    Состояние одной загрузки снимка, передаваемое по всем этапам.

    Все записи выполняются в одной транзакции `db_session` и фиксируются
    одним commit в конце загрузки.
    """

    db_session: AsyncSession
    user_id: uuid.UUID
    remapper: IdentityRemapper = field(default_factory=IdentityRemapper)
    synced_habits: int = 0
    synced_checkins: int = 0
    synced_goals: int = 0
    synced_links: int = 0
    skipped_checkins: int = 0
    skipped_links: int = 0


class SyncService:
    """
    Сервис облачной синхронизации.

    Загрузка (push) сохраняет полный снимок устройства атомарно: либо записываются
    все сущности снимка, либо ни одна. Выгрузка (pull) возвращает все данные пользователя.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        habit_repository: HabitRepository,
        check_in_repository: CheckInRepository,
        goal_repository: GoalRepository,
        goal_habit_repository: GoalHabitRepository,
    ):
        """
        Инициализирует сервис синхронизации.

        Args:
            user_repository (UserRepository): Репозиторий пользователей.
            habit_repository (HabitRepository): Репозиторий привычек.
            check_in_repository (CheckInRepository): Репозиторий отметок.
            goal_repository (GoalRepository): Репозиторий целей.
            goal_habit_repository (GoalHabitRepository): Репозиторий связей целей и привычек.
        """
        self.user_repository = user_repository
        self.habit_repository = habit_repository
        self.check_in_repository = check_in_repository
        self.goal_repository = goal_repository
        self.goal_habit_repository = goal_habit_repository

    @staticmethod
    def _ensure_sync_enabled(user: User) -> None:
        """
        Проверяет, что пользователь включил облачную синхронизацию.

        Raises:
            BadRequestException: Если синхронизация отключена.
        """
        if not user.cloud_sync_enabled:
            log.warning(f"Пользователь ID {user.id} обратился к синхронизации, но она отключена.")
            raise BadRequestException(message="Облачная синхронизация не включена.", error_type="sync_disabled")

    async def get_status(self, db_session: AsyncSession, *, current_user: User) -> SyncStatusSchema:
        """
        Возвращает состояние синхронизации и количество записей пользователя в облаке.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            current_user (User): Аутентифицированный пользователь.

        Returns:
            SyncStatusSchema: Флаг синхронизации, время последней загрузки и счетчики.
        """
        user_id = current_user.id

        habits_count = await self.habit_repository.count_by_user_id(db_session, user_id=user_id)
        checkins_count = await self.check_in_repository.count_by_user_id(db_session, user_id=user_id)
        goals_count = await self.goal_repository.count_by_user_id(db_session, user_id=user_id)

        return SyncStatusSchema(
            enabled=current_user.cloud_sync_enabled,
            last_sync=as_utc(current_user.last_synced_at) if current_user.last_synced_at else None,
            habits_count=habits_count,
            checkins_count=checkins_count,
            goals_count=goals_count,
        )

    async def set_cloud_sync(
        self, db_session: AsyncSession, *, current_user: User, enabled: bool
    ) -> CloudSyncResponseSchema:
        """
        Включает или отключает облачную синхронизацию пользователя.

        Отключение не удаляет уже загруженные данные.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            current_user (User): Аутентифицированный пользователь.
            enabled (bool): Новое состояние синхронизации.

        Returns:
            CloudSyncResponseSchema: Новое состояние и сообщение для пользователя.
        """
        user_id = current_user.id

        try:
            await self.user_repository.update(db_session, db_obj=current_user, obj_in={"cloud_sync_enabled": enabled})
            await db_session.commit()

        except Exception as exc:
            await db_session.rollback()
            log.opt(exception=exc).error(f"Ошибка при изменении флага синхронизации пользователя ID {user_id}: {exc}")
            raise

        log.info(f"Облачная синхронизация пользователя ID {user_id} {'включена' if enabled else 'отключена'}.")

        return CloudSyncResponseSchema(
            enabled=enabled,
            message=SYNC_ENABLED_MESSAGE if enabled else SYNC_DISABLED_MESSAGE,
        )

    async def push(
        self, db_session: AsyncSession, *, current_user: User, snapshot: SyncSnapshotSchema
    ) -> SyncResultSchema:
        """
        Загружает снимок устройства в облако одной транзакцией.

        Порядок этапов: привычки, отметки, цели, связи целей с привычками.
        Привычки и цели получают новые канонические ID при каждой загрузке.
        Отметки и связи, ссылающиеся на отсутствующие в снимке записи, пропускаются без ошибки.
        Любая ошибка (некорректная дата, ошибка БД) откатывает всю загрузку.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            current_user (User): Аутентифицированный пользователь.
            snapshot (SyncSnapshotSchema): Снимок данных устройства.

        Returns:
            SyncResultSchema: Количество сохраненных привычек, отметок, целей и время завершения.

        Raises:
            BadRequestException: Если синхронизация отключена или в снимке некорректная дата.
            StoreFailureException: Если запись в БД завершилась ошибкой.
        """
        self._ensure_sync_enabled(current_user)

        # После rollback атрибуты ORM-объекта недоступны, поэтому ID сохраняем заранее
        user_id = current_user.id
        unit = PushUnitOfWork(db_session=db_session, user_id=user_id)

        log.info(
            f"Загрузка снимка пользователя ID {user_id}: привычек {len(snapshot.habits)}, "
            f"отметок {len(snapshot.check_ins)}, целей {len(snapshot.goals)}, связей {len(snapshot.goal_habits)}."
        )

        try:
            await self._push_habits(unit, snapshot.habits)
            await self._push_check_ins(unit, snapshot.check_ins)
            await self._push_goals(unit, snapshot.goals)
            await self._push_goal_habits(unit, snapshot.goal_habits)

            synced_at = datetime.now(timezone.utc)
            await self.user_repository.mark_synced(db_session, user_id=user_id, synced_at=synced_at)

            # Единственная точка фиксации загрузки
            await db_session.commit()

        except BadRequestException:
            await db_session.rollback()
            log.warning(f"Загрузка снимка пользователя ID {user_id} отклонена, изменения откатаны.")
            raise

        except SQLAlchemyError as exc:
            await db_session.rollback()
            log.opt(exception=exc).error(f"Ошибка БД при загрузке снимка пользователя ID {user_id}: {exc}")
            raise StoreFailureException() from exc

        except Exception as exc:
            await db_session.rollback()
            log.opt(exception=exc).error(f"Ошибка при загрузке снимка пользователя ID {user_id}: {exc}")
            raise

        if unit.remapper.misses:
            log.warning(
                f"Пропущено записей с неизвестными родительскими ID: отметок {unit.skipped_checkins}, "
                f"связей {unit.skipped_links} (пользователь ID {user_id})."
            )

        log.info(
            f"Снимок пользователя ID {user_id} загружен: привычек {unit.synced_habits}, "
            f"отметок {unit.synced_checkins}, целей {unit.synced_goals}, связей {unit.synced_links}."
        )

        return SyncResultSchema(
            success=True,
            synced_habits=unit.synced_habits,
            synced_checkins=unit.synced_checkins,
            synced_goals=unit.synced_goals,
            synced_at=synced_at,
        )

    async def _push_habits(self, unit: PushUnitOfWork, habits: list[HabitSyncSchema]) -> None:
        """Сохраняет привычки под новыми каноническими ID и регистрирует их в словаре сопоставления."""
        for habit in habits:
            canonical_id = uuid.uuid4()

            await self.habit_repository.upsert(
                unit.db_session,
                values={
                    "id": canonical_id,
                    "user_id": unit.user_id,
                    "name": habit.name,
                    "description": habit.description,
                    "habit_type": habit.habit_type,
                    "unit": habit.unit,
                    "target_value": habit.target_value,
                    "target_direction": habit.target_direction,
                    "archived": habit.archived,
                    "created_at": as_utc(habit.created_at),
                    "updated_at": as_utc(habit.updated_at),
                },
            )

            unit.remapper.register_habit(habit.local_id, canonical_id)
            unit.synced_habits += 1

    async def _push_check_ins(self, unit: PushUnitOfWork, check_ins: list[CheckInSyncSchema]) -> None:
        """
        Сохраняет отметки в два этапа: отбор отметок с известной привычкой, затем запись.

        Дата разбирается только у отобранных отметок. Некорректная дата прерывает загрузку.
        """
        resolved: list[tuple[int, uuid.UUID, CheckInSyncSchema]] = []

        for index, check_in in enumerate(check_ins):
            habit_id = unit.remapper.resolve_habit(check_in.habit_local_id)

            if habit_id is None:
                log.debug(f"Отметка '{check_in.local_id}' ссылается на неизвестную привычку, пропущена.")
                unit.skipped_checkins += 1
                continue

            resolved.append((index, habit_id, check_in))

        for index, habit_id, check_in in resolved:
            effective_date = parse_calendar_date(
                check_in.effective_date,
                loc=["body", "checkIns", index, "effectiveDate"],
            )

            await self.check_in_repository.upsert(
                unit.db_session,
                values={
                    "id": uuid.uuid4(),
                    "habit_id": habit_id,
                    "user_id": unit.user_id,
                    "value": check_in.value,
                    "note": check_in.note,
                    "effective_date": effective_date,
                    "created_at": as_utc(check_in.created_at),
                },
            )

            unit.synced_checkins += 1

    async def _push_goals(self, unit: PushUnitOfWork, goals: list[GoalSyncSchema]) -> None:
        """Сохраняет цели под новыми каноническими ID и регистрирует их в словаре сопоставления."""
        for index, goal in enumerate(goals):
            canonical_id = uuid.uuid4()
            deadline = parse_calendar_date(goal.deadline, loc=["body", "goals", index, "deadline"])

            await self.goal_repository.upsert(
                unit.db_session,
                values={
                    "id": canonical_id,
                    "user_id": unit.user_id,
                    "name": goal.name,
                    "description": goal.description,
                    "deadline": deadline,
                    "status": goal.status,
                    "created_at": as_utc(goal.created_at),
                    "updated_at": as_utc(goal.updated_at),
                },
            )

            unit.remapper.register_goal(goal.local_id, canonical_id)
            unit.synced_goals += 1

    async def _push_goal_habits(self, unit: PushUnitOfWork, links: list[GoalHabitSyncSchema]) -> None:
        """Сохраняет связи целей с привычками, если обе стороны связи есть в снимке."""
        for link in links:
            goal_id = unit.remapper.resolve_goal(link.goal_local_id)
            habit_id = unit.remapper.resolve_habit(link.habit_local_id)

            if goal_id is None or habit_id is None:
                log.debug(
                    f"Связь цели '{link.goal_local_id}' с привычкой '{link.habit_local_id}' "
                    "ссылается на неизвестную запись, пропущена."
                )
                unit.skipped_links += 1
                continue

            await self.goal_habit_repository.upsert(
                unit.db_session,
                values={
                    "id": uuid.uuid4(),
                    "goal_id": goal_id,
                    "habit_id": habit_id,
                    "weight": link.weight,
                },
            )

            unit.synced_links += 1

    async def pull(self, db_session: AsyncSession, *, current_user: User) -> SyncSnapshotSchema:
        """
        Выгружает все данные пользователя в виде снимка.

        Канонические ID выгружаются в полях локальных ID. Четыре чтения выполняются
        в одной транзакции с уровнем изоляции из настроек (SYNC_PULL_ISOLATION_LEVEL),
        чтобы связи и цели в снимке были согласованы между собой.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            current_user (User): Аутентифицированный пользователь.

        Returns:
            SyncSnapshotSchema: Снимок данных пользователя.

        Raises:
            BadRequestException: Если синхронизация отключена.
        """
        self._ensure_sync_enabled(current_user)
        user_id = current_user.id

        # Завершаем транзакцию, в которой загружался пользователь,
        # чтобы следующая началась с нужным уровнем изоляции
        await db_session.commit()

        if settings.SYNC_PULL_ISOLATION_LEVEL:
            await db_session.connection(execution_options={"isolation_level": settings.SYNC_PULL_ISOLATION_LEVEL})

        habits = await self.habit_repository.get_habits_by_user_id(db_session, user_id=user_id)
        check_ins = await self.check_in_repository.get_check_ins_by_user_id(db_session, user_id=user_id)
        goals = await self.goal_repository.get_goals_by_user_id(db_session, user_id=user_id)
        links = await self.goal_habit_repository.get_links_by_user_id(db_session, user_id=user_id)

        snapshot = SyncSnapshotSchema(
            habits=[
                HabitSyncSchema(
                    local_id=str(habit.id),
                    name=habit.name,
                    description=habit.description,
                    habit_type=habit.habit_type,
                    unit=habit.unit,
                    target_value=habit.target_value,
                    target_direction=habit.target_direction,
                    archived=habit.archived,
                    created_at=as_utc(habit.created_at),
                    updated_at=as_utc(habit.updated_at),
                )
                for habit in habits
            ],
            check_ins=[
                CheckInSyncSchema(
                    local_id=str(check_in.id),
                    habit_local_id=str(check_in.habit_id),
                    value=check_in.value,
                    note=check_in.note,
                    effective_date=check_in.effective_date.isoformat(),
                    created_at=as_utc(check_in.created_at),
                )
                for check_in in check_ins
            ],
            goals=[
                GoalSyncSchema(
                    local_id=str(goal.id),
                    name=goal.name,
                    description=goal.description,
                    deadline=goal.deadline.isoformat(),
                    status=goal.status,
                    created_at=as_utc(goal.created_at),
                    updated_at=as_utc(goal.updated_at),
                )
                for goal in goals
            ],
            goal_habits=[
                GoalHabitSyncSchema(
                    goal_local_id=str(link.goal_id),
                    habit_local_id=str(link.habit_id),
                    weight=link.weight,
                )
                for link in links
            ],
            synced_at=datetime.now(timezone.utc),
        )

        # Транзакция только читала данные
        await db_session.commit()

        log.info(
            f"Выгружен снимок пользователя ID {user_id}: привычек {len(snapshot.habits)}, "
            f"отметок {len(snapshot.check_ins)}, целей {len(snapshot.goals)}, связей {len(snapshot.goal_habits)}."
        )

        return snapshot
