import logging
import sqlite3
from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from resale_ledger.config import get_settings
from resale_ledger.core.constants import CONFIG_ERROR_MESSAGE, PLACEHOLDER_MARKERS
from resale_ledger.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


def database_configured(database_url) -> bool:
    if not database_url or not str(database_url).strip():
        return False
    lowered = str(database_url).lower()
    return not any(marker in lowered for marker in PLACEHOLDER_MARKERS)


def _is_sqlite_memory(db_url) -> bool:
    sqlite_db = db_url.database
    if sqlite_db in (None, "", ":memory:"):
        return True
    return db_url.query.get("mode") == "memory"


def create_db_engine(database_url) -> Engine:
    if not database_configured(database_url):
        raise ConfigurationError(CONFIG_ERROR_MESSAGE)
    try:
        db_url = make_url(database_url)
    except ArgumentError as exc:
        raise ConfigurationError(f"{CONFIG_ERROR_MESSAGE} ({exc})") from exc

    is_sqlite = db_url.get_backend_name() == "sqlite"
    is_sqlite_memory = is_sqlite and _is_sqlite_memory(db_url)

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if is_sqlite_memory:
            engine_kwargs.update(poolclass=StaticPool)

    try:
        engine = create_engine(db_url, connect_args=connect_args, **engine_kwargs)
    except (ArgumentError, ImportError) as exc:
        raise ConfigurationError(f"{CONFIG_ERROR_MESSAGE} ({exc})") from exc

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                # Store deletes cascade to products through the foreign key.
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
                if not is_sqlite_memory:
                    try:
                        cursor.execute("PRAGMA journal_mode=WAL")
                        cursor.execute("PRAGMA synchronous=NORMAL")
                    except sqlite3.DatabaseError:
                        pass
            finally:
                cursor.close()

    return engine


@lru_cache
def get_engine() -> Engine:
    """Process-wide engine built from settings on first use."""
    return create_db_engine(get_settings().DATABASE_URL)


_SQLITE_COLUMN_DEFAULTS = {
    "products": {
        "sold_at": "TEXT",
        "product_url": "TEXT",
        "updated_at": "DATETIME NOT NULL DEFAULT '1970-01-01 00:00:00'",
    },
}

_SQLITE_POST_ADD_UPDATES = {
    ("products", "updated_at"): (
        "UPDATE products SET updated_at = created_at "
        "WHERE updated_at = '1970-01-01 00:00:00'"
    ),
}


def _escape_sqlite_identifier(value: str) -> str:
    return value.replace('"', '""')


def _get_sqlite_columns(conn, table_name: str):
    escaped_table = _escape_sqlite_identifier(table_name)
    # noinspection SqlNoDataSourceInspection
    result = conn.exec_driver_sql(
        f'PRAGMA table_info("{escaped_table}")'
    ).mappings()
    return {row["name"] for row in result}


def ensure_sqlite_schema(engine: Engine) -> list[tuple[str, str]]:
    """Add columns introduced after a database file was first created."""
    if engine.dialect.name != "sqlite":
        return []
    added_columns = []
    try:
        with engine.begin() as conn:
            for table_name, columns in _SQLITE_COLUMN_DEFAULTS.items():
                existing = _get_sqlite_columns(conn, table_name)
                if not existing:
                    continue
                for column_name, ddl in columns.items():
                    if column_name in existing:
                        continue
                    escaped_table = _escape_sqlite_identifier(table_name)
                    escaped_column = _escape_sqlite_identifier(column_name)
                    # noinspection SqlNoDataSourceInspection
                    conn.exec_driver_sql(
                        f'ALTER TABLE "{escaped_table}" ADD COLUMN "{escaped_column}" {ddl}'
                    )
                    added_columns.append((table_name, column_name))
            for table_name, column_name in added_columns:
                update_stmt = _SQLITE_POST_ADD_UPDATES.get((table_name, column_name))
                if update_stmt:
                    # noinspection SqlNoDataSourceInspection
                    conn.exec_driver_sql(update_stmt)
    except SQLAlchemyError:
        logger.warning("Unable to upgrade SQLite schema in place.", exc_info=True)
        raise
    for table_name, column_name in added_columns:
        logger.info("Added missing column %s.%s", table_name, column_name)
    return added_columns


def init_schema(engine: Engine) -> None:
    from resale_ledger.database.base import Base
    from resale_ledger.models import import_all_models

    import_all_models()
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema(engine)
