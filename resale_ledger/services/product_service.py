from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from resale_ledger.database.session import guarded
from resale_ledger.models.product import Product
from resale_ledger.schemas.product import ProductWithStore
from resale_ledger.services.url_service import resolve_product_url

UPDATABLE_FIELDS = (
    "name",
    "store_id",
    "purchase_price",
    "purchase_date",
    "sale_price",
    "sale_date",
    "sold_at",
    "product_url",
)


def list_products(db: Session) -> list[Product]:
    with guarded(db, "fetch products"):
        products = (
            db.execute(
                select(Product)
                .options(joinedload(Product.store))
                .order_by(Product.created_at.desc(), Product.id.desc())
            )
            .scalars()
            .all()
        )
    return list(products)


def get_product(db: Session, product_id: int) -> Optional[Product]:
    with guarded(db, "fetch product"):
        return (
            db.execute(
                select(Product)
                .options(joinedload(Product.store))
                .where(Product.id == product_id)
            )
            .scalars()
            .first()
        )


def create_product(db: Session, values: dict[str, Any], *, commit: bool = True) -> Product:
    product = Product(**{key: values.get(key) for key in UPDATABLE_FIELDS if key in values})
    with guarded(db, "create product"):
        db.add(product)
        if commit:
            db.commit()
            db.refresh(product)
        else:
            db.flush()
    return product


def update_product(db: Session, product: Product, updates: dict[str, Any]) -> Product:
    for key, value in updates.items():
        if key in UPDATABLE_FIELDS:
            setattr(product, key, value)
    product.updated_at = datetime.now(timezone.utc)
    with guarded(db, "update product"):
        db.commit()
        db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> bool:
    with guarded(db, "delete product"):
        product = db.get(Product, product_id)
        if product is None:
            return False
        db.delete(product)
        db.commit()
    return True


def to_product_with_store(product: Product) -> ProductWithStore:
    base = ProductWithStore.model_validate(product)
    store_name = product.store.name if product.store is not None else None
    base.resolved_url = resolve_product_url(product.name, store_name, product.product_url)
    return base


__all__ = [
    "UPDATABLE_FIELDS",
    "create_product",
    "delete_product",
    "get_product",
    "list_products",
    "to_product_with_store",
    "update_product",
]
