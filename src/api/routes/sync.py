"""
Эндпоинты облачной синхронизации данных устройства.
"""

from fastapi import APIRouter, status

from src.api.core.dependencies import CurrentUser, DBSession, SyncSvc
from src.api.schemas import (
    CloudSyncResponseSchema,
    SyncResultSchema,
    SyncSnapshotSchema,
    SyncStatusSchema,
)

router = APIRouter(prefix="/sync", tags=["Sync"])


@router.get(
    "/status",
    response_model=SyncStatusSchema,
    status_code=status.HTTP_200_OK,
    summary="Состояние облачной синхронизации",
    description="Возвращает флаг синхронизации, время последней загрузки и количество записей в облаке.",
)
async def get_sync_status(
    db_session: DBSession,
    current_user: CurrentUser,
    sync_service: SyncSvc,
) -> SyncStatusSchema:
    return await sync_service.get_status(db_session, current_user=current_user)


@router.post(
    "/enable",
    response_model=CloudSyncResponseSchema,
    status_code=status.HTTP_200_OK,
    summary="Включение облачной синхронизации",
)
async def enable_sync(
    db_session: DBSession,
    current_user: CurrentUser,
    sync_service: SyncSvc,
) -> CloudSyncResponseSchema:
    return await sync_service.set_cloud_sync(db_session, current_user=current_user, enabled=True)


@router.post(
    "/disable",
    response_model=CloudSyncResponseSchema,
    status_code=status.HTTP_200_OK,
    summary="Отключение облачной синхронизации",
    description="Отключает синхронизацию. Уже загруженные данные не удаляются.",
)
async def disable_sync(
    db_session: DBSession,
    current_user: CurrentUser,
    sync_service: SyncSvc,
) -> CloudSyncResponseSchema:
    return await sync_service.set_cloud_sync(db_session, current_user=current_user, enabled=False)


@router.post(
    "/push",
    response_model=SyncResultSchema,
    status_code=status.HTTP_200_OK,
    summary="Загрузка снимка данных устройства",
    description=(
        "Сохраняет привычки, отметки, цели и их связи одной транзакцией. "
        "При ошибке не сохраняется ничего."
    ),
)
async def push_snapshot(
    db_session: DBSession,
    current_user: CurrentUser,
    sync_service: SyncSvc,
    snapshot: SyncSnapshotSchema,
) -> SyncResultSchema:
    """
    Загружает снимок данных устройства в облако.

    Args:
        db_session: Асинхронная сессия базы данных.
        current_user: Аутентифицированный пользователь.
        sync_service: Сервис синхронизации.
        snapshot: Снимок данных устройства.

    Returns:
        SyncResultSchema: Количество сохраненных записей и время завершения загрузки.
    """
    return await sync_service.push(db_session, current_user=current_user, snapshot=snapshot)


@router.get(
    "/pull",
    response_model=SyncSnapshotSchema,
    status_code=status.HTTP_200_OK,
    summary="Выгрузка данных пользователя",
    description="Возвращает все привычки, отметки, цели и связи пользователя в формате снимка.",
)
async def pull_snapshot(
    db_session: DBSession,
    current_user: CurrentUser,
    sync_service: SyncSvc,
) -> SyncSnapshotSchema:
    return await sync_service.pull(db_session, current_user=current_user)
