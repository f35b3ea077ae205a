"""Profit analytics over purchase/sale records.

The ``compute_*`` functions are pure: they take any iterable of
:class:`ProductRecord` and return frozen result objects. ``AnalyticsEngine``
pairs them with a :class:`RecordStore` so each call re-reads the store.

An item counts as sold when its ``sale_price`` is set. ``sale_date`` only
matters for the time-range statistics, where it narrows the sold set further.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from resale_ledger.core.constants import DEFAULT_MOST_PROFITABLE_LIMIT, UNKNOWN_STORE_NAME
from resale_ledger.core.dates import week_bounds, year_bounds
from resale_ledger.services.record_store import ProductRecord, RecordStore, StoreRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfitStats:
    total_profit: float
    total_revenue: float
    total_cost: float
    profit_margin: float
    total_items: int
    sold_items: int
    unsold_items: int


@dataclass(frozen=True)
class TimeRangeStats:
    profit: float
    revenue: float
    cost: float
    items_sold: int

    @property
    def avg_profit(self) -> float:
        if self.items_sold <= 0:
            return 0.0
        return self.profit / self.items_sold


@dataclass(frozen=True)
class PeriodStats(TimeRangeStats):
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass(frozen=True)
class PeriodSummary:
    week: PeriodStats
    year: PeriodStats


@dataclass(frozen=True)
class ProductProfitability:
    product_id: int
    product_name: str
    store_name: str
    profit: float
    profit_margin: float
    purchase_price: float
    sale_price: float


@dataclass(frozen=True)
class StoreStats:
    store: StoreRef
    profit: float
    items: int


def _sold(products: Iterable[ProductRecord]) -> list[ProductRecord]:
    return [product for product in products if product.is_sold]


def compute_profit_stats(products: Iterable[ProductRecord]) -> ProfitStats:
    products = list(products)
    sold = _sold(products)

    total_cost = sum(product.purchase_price for product in products)
    total_revenue = sum(product.sale_price for product in sold)
    sold_cost = sum(product.purchase_price for product in sold)
    # Unsold inventory is part of total cost but not of realised profit.
    total_profit = total_revenue - sold_cost
    profit_margin = (total_profit / total_revenue) * 100 if total_revenue > 0 else 0.0

    return ProfitStats(
        total_profit=float(total_profit),
        total_revenue=float(total_revenue),
        total_cost=float(total_cost),
        profit_margin=float(profit_margin),
        total_items=len(products),
        sold_items=len(sold),
        unsold_items=len(products) - len(sold),
    )


def compute_time_range_stats(
    products: Iterable[ProductRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> TimeRangeStats:
    """Stats for items sold between ``start`` and ``end`` inclusive.

    Rows with a sale date but no sale price are not treated as sold. Either
    bound may be omitted when the caller has already filtered by date.
    """
    in_range = []
    for product in products:
        if not product.is_sold or product.sale_date is None:
            continue
        if start is not None and product.sale_date < start:
            continue
        if end is not None and product.sale_date > end:
            continue
        in_range.append(product)

    cost = sum(product.purchase_price for product in in_range)
    revenue = sum(product.sale_price for product in in_range)
    return TimeRangeStats(
        profit=float(revenue - cost),
        revenue=float(revenue),
        cost=float(cost),
        items_sold=len(in_range),
    )


def _store_name(store: Optional[StoreRef]) -> str:
    if store is None or not store.name:
        return UNKNOWN_STORE_NAME
    return store.name


def rank_most_profitable(
    products: Iterable[ProductRecord],
    limit: int = DEFAULT_MOST_PROFITABLE_LIMIT,
) -> list[ProductProfitability]:
    ranked = []
    for product in _sold(products):
        profit = product.sale_price - product.purchase_price
        margin = (profit / product.sale_price) * 100 if product.sale_price > 0 else 0.0
        ranked.append(
            ProductProfitability(
                product_id=product.id,
                product_name=product.name,
                store_name=_store_name(product.store),
                profit=float(profit),
                profit_margin=float(margin),
                purchase_price=float(product.purchase_price),
                sale_price=float(product.sale_price),
            )
        )
    # sorted() is stable, so equal profits keep the incoming order.
    ranked = sorted(ranked, key=lambda entry: entry.profit, reverse=True)
    return ranked[: max(int(limit), 0)]


def compute_store_stats(products: Iterable[ProductRecord]) -> list[StoreStats]:
    groups: dict[int, dict] = {}
    for product in products:
        group = groups.get(product.store_id)
        if group is None:
            store = product.store or StoreRef(id=product.store_id, name=UNKNOWN_STORE_NAME)
            group = {"store": store, "profit": 0.0, "items": 0}
            groups[product.store_id] = group
        group["items"] += 1
        if product.is_sold:
            group["profit"] += product.sale_price - product.purchase_price

    results = [
        StoreStats(store=group["store"], profit=float(group["profit"]), items=group["items"])
        for group in groups.values()
    ]
    return sorted(results, key=lambda entry: entry.profit, reverse=True)


class AnalyticsEngine:
    def __init__(
        self,
        record_store: RecordStore,
        *,
        default_limit: int = DEFAULT_MOST_PROFITABLE_LIMIT,
    ):
        self.record_store = record_store
        self.default_limit = default_limit

    def overall_stats(self) -> ProfitStats:
        stats = compute_profit_stats(self.record_store.list_products())
        logger.debug(
            "Overall stats: %s items, %s sold", stats.total_items, stats.sold_items
        )
        return stats

    def time_range_stats(self, start: date, end: date) -> TimeRangeStats:
        if start > end:
            return compute_time_range_stats([])
        products = self.record_store.list_products_sold_between(start, end)
        return compute_time_range_stats(products, start, end)

    def period_stats(self, start: date, end: date) -> PeriodStats:
        stats = self.time_range_stats(start, end)
        return PeriodStats(
            profit=stats.profit,
            revenue=stats.revenue,
            cost=stats.cost,
            items_sold=stats.items_sold,
            start=start,
            end=end,
        )

    def period_summary(self, today: Optional[date] = None) -> PeriodSummary:
        today = today or date.today()
        return PeriodSummary(
            week=self.period_stats(*week_bounds(today)),
            year=self.period_stats(*year_bounds(today)),
        )

    def most_profitable(self, limit: Optional[int] = None) -> list[ProductProfitability]:
        if limit is None:
            limit = self.default_limit
        return rank_most_profitable(self.record_store.list_sold_products(), limit)

    def store_stats(self) -> list[StoreStats]:
        return compute_store_stats(self.record_store.list_products())


__all__ = [
    "AnalyticsEngine",
    "PeriodStats",
    "PeriodSummary",
    "ProductProfitability",
    "ProfitStats",
    "StoreStats",
    "TimeRangeStats",
    "compute_profit_stats",
    "compute_store_stats",
    "compute_time_range_stats",
    "rank_most_profitable",
]
