"""Executor: runs ``$n``-parameterized statements on a pooled SQLAlchemy engine."""

import logging
import re
from typing import Any, Dict, List, Sequence, Tuple

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from config import AppConfig
from errors import ConstraintViolationError, DataAccessError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$(\d+)")


def to_named_binds(statement: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """Rewrite ``$1 .. $n`` into ``:p1 .. :pn`` and key the values to match.

    Every placeholder must have a value at its ordinal position.
    """
    for match in _PLACEHOLDER.finditer(statement):
        index = int(match.group(1))
        if index < 1 or index > len(params):
            raise ValueError(
                f"placeholder ${index} has no bound value ({len(params)} parameters)"
            )
    rendered = _PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", statement)
    return rendered, {f"p{i}": value for i, value in enumerate(params, start=1)}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class QueryExecutor:
    """The only object that talks to the database.

    Create one at startup, share it, and call ``dispose()`` on shutdown.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "QueryExecutor":
        kwargs = {"echo": cfg.echo_sql, "pool_pre_ping": True}
        if cfg.is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
        else:
            kwargs["pool_size"] = cfg.pool_size
        return cls(create_engine(cfg.database_url, **kwargs))

    def execute(self, statement: str, params: Sequence[Any] = (), write: bool = False) -> List[Dict[str, Any]]:
        """Run one statement and return its rows as plain dicts.

        Write statements run inside ``Engine.begin()`` so they commit; rows from
        ``RETURNING`` are read before the commit.
        """
        sql, binds = to_named_binds(statement, params)
        logger.debug("Executing %s with %s", " ".join(statement.split()), list(params))
        try:
            if write:
                with self.engine.begin() as conn:
                    result = conn.execute(text(sql), binds)
                    return [dict(row) for row in result.mappings().all()]
            with self.engine.connect() as conn:
                result = conn.execute(text(sql), binds)
                return [dict(row) for row in result.mappings().all()]
        except IntegrityError as exc:
            logger.error("Constraint violation: %s", exc.orig)
            raise ConstraintViolationError(str(exc.orig), statement=statement) from exc
        except SQLAlchemyError as exc:
            logger.error("Statement failed: %s", exc)
            raise DataAccessError(str(exc), statement=statement) from exc

    def check_connection(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.error("Database is not reachable: %s", exc)
            return False

    def dispose(self) -> None:
        self.engine.dispose()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.dispose()


def create_executor(cfg: AppConfig) -> QueryExecutor:
    return QueryExecutor.from_config(cfg)
