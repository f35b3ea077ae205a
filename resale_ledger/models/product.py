from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from resale_ledger.database.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    store_id = Column(Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)

    purchase_price = Column(Float, nullable=False)
    purchase_date = Column(Date, nullable=False)

    # A non-null sale_price is what marks an item as sold.
    sale_price = Column(Float)
    sale_date = Column(Date)
    sold_at = Column(String)
    product_url = Column(String)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    store = relationship("Store", back_populates="products")

    __table_args__ = (
        Index("idx_products_store", "store_id"),
        Index("idx_products_sale_date", "sale_date"),
    )


__all__ = ["Product"]
