from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from resale_ledger.core.dates import parse_range_bound
from resale_ledger.dependencies import get_analytics_engine, require_login_api
from resale_ledger.schemas.analytics import (
    PeriodSummaryRead,
    ProductProfitabilityRead,
    ProfitStatsRead,
    StoreStatsRead,
    TimeRangeStatsRead,
)
from resale_ledger.services.analytics_service import AnalyticsEngine

router = APIRouter(
    prefix="/api/analytics",
    tags=["Analytics"],
    dependencies=[Depends(require_login_api)],
)


@router.get("/stats", response_model=ProfitStatsRead)
def overall_stats(engine: AnalyticsEngine = Depends(get_analytics_engine)):
    return ProfitStatsRead.model_validate(engine.overall_stats())


@router.get("/range", response_model=TimeRangeStatsRead)
def range_stats(
    start: Optional[str] = Query(None, description="Range start (YYYY-MM-DD or ISO timestamp)"),
    end: Optional[str] = Query(None, description="Range end, inclusive"),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
):
    if not start or not end:
        raise HTTPException(status_code=400, detail="Start and end dates required")
    start_date = parse_range_bound(start)
    end_date = parse_range_bound(end)
    if start_date is None or end_date is None:
        raise HTTPException(status_code=400, detail="Start and end must be ISO dates")
    return TimeRangeStatsRead.model_validate(engine.time_range_stats(start_date, end_date))


@router.get("/periods", response_model=PeriodSummaryRead)
def period_summary(
    today: Optional[date] = Query(None, description="Reference date, defaults to today"),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
):
    return PeriodSummaryRead.model_validate(engine.period_summary(today), from_attributes=True)


@router.get("/profitable", response_model=list[ProductProfitabilityRead])
def most_profitable(
    limit: Optional[int] = Query(None, ge=0, description="Max products to return"),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
):
    return [
        ProductProfitabilityRead.model_validate(entry)
        for entry in engine.most_profitable(limit)
    ]


@router.get("/stores", response_model=list[StoreStatsRead])
def store_stats(engine: AnalyticsEngine = Depends(get_analytics_engine)):
    return [StoreStatsRead.model_validate(entry) for entry in engine.store_stats()]


__all__ = ["router"]
