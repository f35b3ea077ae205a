from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from resale_ledger.dependencies import get_db, require_login_api
from resale_ledger.schemas.store import StoreCreate, StoreRead
from resale_ledger.services.store_service import create_store, delete_store, list_stores

router = APIRouter(
    prefix="/api/stores",
    tags=["Stores"],
    dependencies=[Depends(require_login_api)],
)


@router.get("", response_model=list[StoreRead])
def get_stores(db: Session = Depends(get_db)):
    return list_stores(db)


@router.post("", response_model=StoreRead, status_code=status.HTTP_201_CREATED)
def post_store(payload: StoreCreate, db: Session = Depends(get_db)):
    if not payload.name or not payload.name.strip():
        raise HTTPException(status_code=400, detail="Store name required")
    return create_store(db, payload.name)


@router.delete("/{store_id}")
def remove_store(store_id: int, db: Session = Depends(get_db)):
    if not delete_store(db, store_id):
        raise HTTPException(status_code=404, detail="Store not found.")
    return {"success": True}


__all__ = ["router"]
