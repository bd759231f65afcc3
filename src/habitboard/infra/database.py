"""Database engine, schema and session infrastructure."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, ContextManager, Iterator, Mapping, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..errors import StorageFailure

SessionFactory = Callable[[], ContextManager[Session]]


def _install_sqlite_pragmas(engine: Engine, pragmas: Mapping[str, str]) -> None:
    """Run ``PRAGMA key=value`` on every new SQLite connection."""

    if engine.dialect.name != "sqlite" or not pragmas:
        return

    @event.listens_for(engine, "connect")
    def _set_pragmas(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        try:
            for key, value in pragmas.items():
                cursor.execute(f"PRAGMA {key}={value}")
        finally:
            cursor.close()


def create_db_engine(config: BaseConfig, *, url: str | None = None, **overrides: Any) -> Engine:
    """Create the SQLModel engine from configuration."""

    engine_options = config.sqlalchemy_engine_options()
    engine_options.update(overrides)
    engine = create_engine(url or config.DATABASE_URL, **engine_options)
    _install_sqlite_pragmas(engine, config.SQLITE_PRAGMAS)
    return engine


def init_database(engine: Engine) -> None:
    """Create all tables that are not there yet."""

    from .. import models  # noqa: F401  # register tables with SQLModel metadata

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Return a callable producing transactional session scopes."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@contextmanager
def storage_errors(operation: str, **context: Any) -> Iterator[None]:
    """Re-raise driver errors as :class:`StorageFailure` for ``operation``."""

    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageFailure(
            f"{operation} failed: {exc.__class__.__name__}",
            operation=operation,
            context={key: str(value) for key, value in context.items()},
        ) from exc


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, SessionFactory]:
    """Engine + session factory with the schema created.

    Used by the store and by tests so both share engine options.
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, create_session_factory(engine)
