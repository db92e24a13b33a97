import logging

from alembic import context
from sqlalchemy import engine_from_config, pool

# Импортируем базовую модель SQLAlchemy
from src.api.models import Base  # Это подтянет все модели через __init__
from src.core_shared.logging_setup import setup_logger

# Настройка логирования

# Логгер Loguru для миграций (только stderr)
loguru_logger = setup_logger("Alembic", file_logging_override=False)


class InterceptHandler(logging.Handler):
    """Перехватывает логи стандартного модуля logging и перенаправляет их в Loguru."""

    # Получаем соответствующий уровень логгера Loguru
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Ищем, откуда был вызван лог, чтобы правильно отобразить stack trace
        frame, depth = logging.currentframe(), 2

        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


# Подменяем logging
logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO, force=True)

# Отключаем лишний шум
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Указываем Alembic на метаданные базовой модели
target_metadata = Base.metadata


def get_database_url() -> str:
    """
    Возвращает URL базы данных для миграций.

    URL, заданный извне (например, `alembic -x` или тестами через Config), имеет приоритет
    над настройками приложения. Настройки импортируются лениво, чтобы offline-режим
    с явным URL не требовал секретов приложения (JWT_SECRET_KEY и т.д.).
    """
    current_db_url = config.get_main_option("sqlalchemy.url")

    if current_db_url:
        return current_db_url

    from src.api.core.config import settings

    return settings.DATABASE_URL


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    This configures the context with just a URL
    and not an Engine. Calls to context.execute() here emit
    the given string to the script output.
    """
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode.

    In this scenario we need to create an Engine
    and associate a connection with the context.
    """
    # Собираем конфигурацию вручную, подставляя URL из настроек
    connectable_config = config.get_section(config.config_ini_section, {})
    connectable_config["sqlalchemy.url"] = get_database_url()

    connectable = engine_from_config(
        connectable_config,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)

        with context.begin_transaction():
            context.run_migrations()

    loguru_logger.info("Миграции применены.")


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
