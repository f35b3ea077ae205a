from sqlalchemy import func, select
from sqlalchemy.orm import Session

from resale_ledger.database.session import guarded
from resale_ledger.models.store import Store


def list_stores(db: Session) -> list[Store]:
    with guarded(db, "fetch stores"):
        stores = db.execute(select(Store).order_by(Store.name)).scalars().all()
    return list(stores)


def find_store_by_name(db: Session, name: str) -> Store | None:
    with guarded(db, "fetch store"):
        return (
            db.execute(select(Store).where(func.lower(Store.name) == name.strip().lower()))
            .scalars()
            .first()
        )


def create_store(db: Session, name: str, *, commit: bool = True) -> Store:
    store = Store(name=name.strip())
    with guarded(db, "create store"):
        db.add(store)
        if commit:
            db.commit()
            db.refresh(store)
        else:
            db.flush()
    return store


def delete_store(db: Session, store_id: int) -> bool:
    """Delete a store; its products go with it through the foreign key cascade."""
    with guarded(db, "delete store"):
        store = db.get(Store, store_id)
        if store is None:
            return False
        db.delete(store)
        db.commit()
    return True


__all__ = [
    "create_store",
    "delete_store",
    "find_store_by_name",
    "list_stores",
]
