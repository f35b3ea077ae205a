from datetime import datetime, timezone

from fastapi import APIRouter

from resale_ledger.config import get_settings
from resale_ledger.database.engine import database_configured

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check():
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "database_configured": database_configured(settings.DATABASE_URL),
        "time": datetime.now(timezone.utc).isoformat(),
    }
