from resale_ledger.database.base import Base
from resale_ledger.database.engine import (
    create_db_engine,
    ensure_sqlite_schema,
    get_engine,
    init_schema,
)
from resale_ledger.database.session import (
    build_session_factory,
    get_db,
    get_session_factory,
    guarded,
)

__all__ = [
    "Base",
    "build_session_factory",
    "create_db_engine",
    "ensure_sqlite_schema",
    "get_db",
    "get_engine",
    "get_session_factory",
    "guarded",
    "init_schema",
]
