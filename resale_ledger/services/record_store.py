import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from resale_ledger.core.errors import QueryError
from resale_ledger.models.product import Product
from resale_ledger.models.store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreRef:
    id: int
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ProductRecord:
    id: int
    name: str
    store_id: int
    purchase_price: float
    sale_price: Optional[float] = None
    purchase_date: Optional[date] = None
    sale_date: Optional[date] = None
    store: Optional[StoreRef] = None

    @property
    def is_sold(self) -> bool:
        return self.sale_price is not None


class RecordStore(Protocol):
    def list_products(self) -> list[ProductRecord]:
        """Every product with its store joined, newest first."""

    def list_sold_products(self) -> list[ProductRecord]:
        """Products with a sale price, highest sale price first."""

    def list_products_sold_between(self, start: date, end: date) -> list[ProductRecord]:
        """Products whose sale date falls within [start, end]."""


def coerce_price(value) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:
        return 0.0
    return number


def to_store_ref(store: Optional[Store]) -> Optional[StoreRef]:
    if store is None:
        return None
    return StoreRef(id=store.id, name=store.name, created_at=store.created_at)


def to_product_record(product: Product, store: Optional[Store] = None) -> ProductRecord:
    sale_price = product.sale_price
    return ProductRecord(
        id=product.id,
        name=product.name,
        store_id=product.store_id,
        purchase_price=coerce_price(product.purchase_price),
        sale_price=None if sale_price is None else coerce_price(sale_price),
        purchase_date=product.purchase_date,
        sale_date=product.sale_date,
        store=to_store_ref(store),
    )


class SqlRecordStore:
    """Read side of the products/stores tables for the analytics engine."""

    def __init__(self, db: Session):
        self.db = db

    def _fetch(self, stmt, action: str) -> list[ProductRecord]:
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Record store read failed while trying to %s", action)
            raise QueryError(action, str(exc)) from exc
        return [to_product_record(product, store) for product, store in rows]

    def _joined(self):
        return select(Product, Store).outerjoin(Store, Store.id == Product.store_id)

    def list_products(self) -> list[ProductRecord]:
        stmt = self._joined().order_by(Product.created_at.desc(), Product.id.desc())
        return self._fetch(stmt, "fetch products")

    def list_sold_products(self) -> list[ProductRecord]:
        stmt = (
            self._joined()
            .where(Product.sale_price.is_not(None))
            .order_by(Product.sale_price.desc())
        )
        return self._fetch(stmt, "fetch sold products")

    def list_products_sold_between(self, start: date, end: date) -> list[ProductRecord]:
        stmt = (
            self._joined()
            .where(Product.sale_date.is_not(None))
            .where(Product.sale_date >= start)
            .where(Product.sale_date <= end)
        )
        return self._fetch(stmt, "fetch range stats")


__all__ = [
    "ProductRecord",
    "RecordStore",
    "SqlRecordStore",
    "StoreRef",
    "coerce_price",
    "to_product_record",
    "to_store_ref",
]
