"""Конфигурация приложения."""

from urllib.parse import quote_plus

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Основные настройки приложения."""

    # --- Статические настройки ---

    # Название приложения
    PROJECT_NAME: str = "Habit Sync API"
    # Версия API
    API_VERSION: str = "0.1.0"
    # Хост API
    API_HOST: str = "0.0.0.0"  # noqa: S104 - 0.0.0.0 необходимо для Docker контейнера
    # Порт API
    API_PORT: int = 8000
    # Алгоритм подписи JWT
    JWT_ALGORITHM: str = "HS256"
    # Срок годности JWT токена в минутах (сутки)
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # --- Настройки, читаемые из .env ---

    # Настройки БД
    DB_NAME: str = Field(default="habit_sync_db", description="Название базы данных")
    DB_USER: str = Field(default="habit_sync_user", description="Имя пользователя базы данных")
    DB_PASSWORD: str = Field(..., description="Пароль пользователя базы данных")
    DB_HOST: str = Field(
        default="db",
        description="Имя хоста базы данных (название сервиса в Docker)",
    )
    DB_PORT: int = Field(default=5432, description="Порт хоста базы данных")

    # Настройки режима разработки/тестирования (для продакшен - False)
    DEVELOPMENT: bool = Field(default=False, description="Режим разработки/тестирования")

    # Настройки безопасности
    JWT_SECRET_KEY: str = Field(..., description="Секретный ключ для подписи JWT")

    # Настройки синхронизации
    SYNC_PULL_ISOLATION_LEVEL: str | None = Field(
        default="REPEATABLE READ",
        description=(
            "Уровень изоляции транзакции, в которой выполняются чтения выгрузки (pull). "
            "Пустое значение - чтения выполняются с уровнем изоляции БД по умолчанию."
        ),
    )

    # Настройки логирования
    LOG_LEVEL: str = Field(default="INFO", description="Уровень логирования")
    LOG_TO_FILE: bool = Field(default=True, description="Дублировать логи в файл")

    # Настройки Sentry
    SENTRY_DSN: str | None = Field(
        default=None,
        description="Sentry DSN для включения интеграции. Если None, Sentry отключен.",
    )

    # --- Вычисляемые поля ---

    # Продакшен режим
    @property
    def PRODUCTION(self) -> bool:
        # Считаем режим продакшеном, если не DEVELOPMENT (разработка/тестирование)
        return not self.DEVELOPMENT

    # Формируем URL основной базы данных
    @computed_field(repr=False)
    def DATABASE_URL(self) -> str:
        """Собирает URL для SQLAlchemy."""

        # Экранируем пользователя и пароль, чтобы спецсимволы не ломали URL
        encoded_user = quote_plus(self.DB_USER)
        encoded_password = quote_plus(self.DB_PASSWORD)

        return f"postgresql+psycopg://{encoded_user}:{encoded_password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Имена переменных окружения не чувствительны к регистру
        extra="ignore",  # Игнорировать лишние переменные  .env
    )


# Создаем глобальный экземпляр настроек
settings = Settings()  # type: ignore[call-arg]
