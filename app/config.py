from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


DEFAULT_DATABASE_URL = "sqlite:///./lightbnb.db"


@dataclass(frozen=True)
class AppConfig:
    database_url: str
    pool_size: int
    echo_sql: bool
    log_level: str
    default_result_limit: int

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    return int(v)


def load_config() -> AppConfig:
    """Read settings from the environment, with .env support for local dev."""
    load_dotenv(override=False)

    return AppConfig(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        pool_size=_env_int("DB_POOL_SIZE", 5),
        echo_sql=_env_bool("DB_ECHO", default=False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        default_result_limit=_env_int("DEFAULT_RESULT_LIMIT", 10),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
