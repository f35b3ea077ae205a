from fastapi import Depends
from sqlalchemy.orm import Session

from resale_ledger.config import get_settings
from resale_ledger.core.auth import require_login_api
from resale_ledger.database.session import get_db
from resale_ledger.services.analytics_service import AnalyticsEngine
from resale_ledger.services.record_store import RecordStore, SqlRecordStore


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    return SqlRecordStore(db)


def get_analytics_engine(
    record_store: RecordStore = Depends(get_record_store),
) -> AnalyticsEngine:
    settings = get_settings()
    return AnalyticsEngine(record_store, default_limit=settings.MOST_PROFITABLE_DEFAULT_LIMIT)


__all__ = [
    "get_analytics_engine",
    "get_db",
    "get_record_store",
    "require_login_api",
]
