import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_ADMIN_ENVIRONMENTS = ("development", "test")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./hotel_booking.db"
    app_env: str = "Development"
    sql_echo: bool = False
    log_level: str = "INFO"
    seed_on_startup: bool = False

    @property
    def admin_enabled(self) -> bool:
        # Reset/seed wipe data, so they only exist outside production.
        return self.app_env.strip().lower() in _ADMIN_ENVIRONMENTS


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=os.environ.get("DATABASE_URL", Settings.database_url),
        app_env=os.environ.get("APP_ENV", Settings.app_env),
        sql_echo=_env_flag("SQL_ECHO"),
        log_level=os.environ.get("LOG_LEVEL", Settings.log_level).upper(),
        seed_on_startup=_env_flag("SEED_ON_STARTUP"),
    )
