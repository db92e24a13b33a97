import uuid
from datetime import date, datetime, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.api.models import CheckIn, Goal, GoalHabit, GoalStatus, Habit, HabitType, TargetDirection, User
from src.api.repositories import CheckInRepository, GoalHabitRepository, HabitRepository, UserRepository

# Помечаем все тесты в модуле как асинхронные
pytestmark = pytest.mark.asyncio

CREATED_AT = datetime(2026, 10, 1, 8, 0, tzinfo=timezone.utc)


def habit_values(user_id: uuid.UUID, habit_id: uuid.UUID, **overrides) -> dict:
    """Значения колонок привычки для upsert."""
    values = {
        "id": habit_id,
        "user_id": user_id,
        "name": "Read",
        "description": None,
        "habit_type": HabitType.NUMERIC,
        "unit": "pages",
        "target_value": 20,
        "target_direction": TargetDirection.AT_LEAST,
        "archived": False,
        "created_at": CREATED_AT,
        "updated_at": CREATED_AT,
    }
    values.update(overrides)
    return values


async def _create_habit(db_session: AsyncSession, user: User) -> uuid.UUID:
    habit_id = uuid.uuid4()
    await HabitRepository(Habit).upsert(db_session, values=habit_values(user.id, habit_id))
    await db_session.commit()
    return habit_id


async def _create_goal(db_session: AsyncSession, user: User, name: str = "Goal") -> Goal:
    goal = Goal(user_id=user.id, name=name, deadline=date(2026, 12, 31), status=GoalStatus.ACTIVE)
    db_session.add(goal)
    await db_session.commit()
    return goal


async def test_check_in_upsert_across_transactions(
    db_session: AsyncSession,
    db_session_factory: async_sessionmaker[AsyncSession],
    sync_user: User,
):
    """Отметки на одну привычку и дату из разных транзакций сливаются в одну запись."""
    repository = CheckInRepository(CheckIn)
    habit_id = await _create_habit(db_session, sync_user)

    def values(value: int, note: str | None) -> dict:
        return {
            "id": uuid.uuid4(),
            "habit_id": habit_id,
            "user_id": sync_user.id,
            "value": value,
            "note": note,
            "effective_date": date(2026, 10, 1),
            "created_at": CREATED_AT,
        }

    # Первая запись
    await repository.upsert(db_session, values=values(1, "первая"))
    await db_session.commit()

    # Вторая запись: новое значение и новая заметка
    await repository.upsert(db_session, values=values(4, "вторая"))
    await db_session.commit()

    async with db_session_factory() as session:
        check_ins = (await session.execute(select(CheckIn))).scalars().all()
    assert len(check_ins) == 1
    assert (check_ins[0].value, check_ins[0].note) == (4, "вторая")

    # Третья запись без заметки: значение обновляется, заметка сохраняется
    await repository.upsert(db_session, values=values(9, None))
    await db_session.commit()

    async with db_session_factory() as session:
        check_ins = (await session.execute(select(CheckIn))).scalars().all()
    assert len(check_ins) == 1
    assert (check_ins[0].value, check_ins[0].note) == (9, "вторая")


async def test_habit_upsert_overwrites_mutable_fields_only(
    db_session: AsyncSession,
    db_session_factory: async_sessionmaker[AsyncSession],
    sync_user: User,
):
    """Повторный upsert привычки с тем же ID обновляет изменяемые поля, но не тип привычки."""
    repository = HabitRepository(Habit)
    habit_id = await _create_habit(db_session, sync_user)

    await repository.upsert(
        db_session,
        values=habit_values(
            sync_user.id,
            habit_id,
            name="Read more",
            habit_type=HabitType.BINARY,
            archived=True,
            target_direction=TargetDirection.AT_MOST,
        ),
    )
    await db_session.commit()

    async with db_session_factory() as session:
        habits = (await session.execute(select(Habit))).scalars().all()

    assert len(habits) == 1
    assert habits[0].name == "Read more"
    assert habits[0].archived is True
    assert habits[0].target_direction == TargetDirection.AT_MOST
    assert habits[0].habit_type == HabitType.NUMERIC


async def test_goal_habit_upsert_overwrites_weight(
    db_session: AsyncSession,
    db_session_factory: async_sessionmaker[AsyncSession],
    sync_user: User,
):
    """Связь цели с привычкой уникальна по паре (цель, привычка), повторный upsert меняет вес."""
    repository = GoalHabitRepository(GoalHabit)
    habit_id = await _create_habit(db_session, sync_user)
    goal = await _create_goal(db_session, sync_user)

    for weight in (1.0, 0.25):
        await repository.upsert(
            db_session,
            values={"id": uuid.uuid4(), "goal_id": goal.id, "habit_id": habit_id, "weight": weight},
        )
        await db_session.commit()

    async with db_session_factory() as session:
        links = await repository.get_links_by_user_id(session, user_id=sync_user.id)

    assert len(links) == 1
    assert links[0].weight == 0.25


async def test_links_are_scoped_to_goal_owner(
    db_session: AsyncSession,
    sync_user: User,
    local_only_user: User,
):
    """Связи пользователя определяются через владельца цели."""
    repository = GoalHabitRepository(GoalHabit)
    own_habit_id = await _create_habit(db_session, sync_user)
    other_habit_id = await _create_habit(db_session, local_only_user)
    own_goal = await _create_goal(db_session, sync_user, name="Own")
    other_goal = await _create_goal(db_session, local_only_user, name="Other")

    await repository.upsert(
        db_session, values={"id": uuid.uuid4(), "goal_id": own_goal.id, "habit_id": own_habit_id, "weight": 1.0}
    )
    await repository.upsert(
        db_session, values={"id": uuid.uuid4(), "goal_id": other_goal.id, "habit_id": other_habit_id, "weight": 1.0}
    )
    await db_session.commit()

    links = await repository.get_links_by_user_id(db_session, user_id=sync_user.id)

    assert [link.goal_id for link in links] == [own_goal.id]


async def test_count_and_mark_synced(
    db_session: AsyncSession,
    db_session_factory: async_sessionmaker[AsyncSession],
    sync_user: User,
):
    """Подсчет привычек пользователя и запись времени синхронизации."""
    habit_repository = HabitRepository(Habit)
    user_repository = UserRepository(User)
    await _create_habit(db_session, sync_user)
    await _create_habit(db_session, sync_user)

    assert await habit_repository.count_by_user_id(db_session, user_id=sync_user.id) == 2

    synced_at = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
    await user_repository.mark_synced(db_session, user_id=sync_user.id, synced_at=synced_at)
    await db_session.commit()

    async with db_session_factory() as session:
        user = await user_repository.get_by_id(session, obj_id=sync_user.id)

    assert user is not None
    assert user.last_synced_at is not None
    # SQLite не хранит смещение часового пояса, поэтому сравниваем без него
    assert user.last_synced_at.replace(tzinfo=None) == synced_at.replace(tzinfo=None)


async def test_upsert_requires_merge_policy(db_session: AsyncSession, sync_user: User):
    """Репозиторий без правила слияния не выполняет upsert."""
    with pytest.raises(RuntimeError):
        await UserRepository(User).upsert(db_session, values={"id": sync_user.id})
