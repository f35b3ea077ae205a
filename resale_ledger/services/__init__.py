from resale_ledger.services.analytics_service import AnalyticsEngine
from resale_ledger.services.ingestion_service import import_products_workbook
from resale_ledger.services.record_store import RecordStore, SqlRecordStore
from resale_ledger.services.url_service import resolve_product_url

__all__ = [
    "AnalyticsEngine",
    "RecordStore",
    "SqlRecordStore",
    "import_products_workbook",
    "resolve_product_url",
]
