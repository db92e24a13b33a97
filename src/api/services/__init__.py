"""Инициализация модуля сервисов."""

from .identity_remapper import IdentityRemapper
from .sync_service import PushUnitOfWork, SyncService

__all__ = [
    "IdentityRemapper",
    "PushUnitOfWork",
    "SyncService",
]
