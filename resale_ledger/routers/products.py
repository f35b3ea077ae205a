from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from resale_ledger.dependencies import get_db, require_login_api
from resale_ledger.schemas.product import ProductCreate, ProductUpdate, ProductWithStore
from resale_ledger.services.product_service import (
    create_product,
    delete_product,
    get_product,
    list_products,
    to_product_with_store,
    update_product,
)

router = APIRouter(
    prefix="/api/products",
    tags=["Products"],
    dependencies=[Depends(require_login_api)],
)


def _load_or_404(db: Session, product_id: int):
    product = get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found.")
    return product


@router.get("", response_model=list[ProductWithStore])
def get_products(db: Session = Depends(get_db)):
    return [to_product_with_store(product) for product in list_products(db)]


@router.get("/{product_id}", response_model=ProductWithStore)
def get_one_product(product_id: int, db: Session = Depends(get_db)):
    return to_product_with_store(_load_or_404(db, product_id))


@router.post("", response_model=ProductWithStore, status_code=status.HTTP_201_CREATED)
def post_product(payload: ProductCreate, db: Session = Depends(get_db)):
    product = create_product(db, payload.model_dump())
    return to_product_with_store(product)


@router.put("/{product_id}", response_model=ProductWithStore)
def put_product(product_id: int, payload: ProductCreate, db: Session = Depends(get_db)):
    product = _load_or_404(db, product_id)
    return to_product_with_store(update_product(db, product, payload.model_dump()))


@router.patch("/{product_id}", response_model=ProductWithStore)
def patch_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    product = _load_or_404(db, product_id)
    updates = payload.model_dump(exclude_unset=True)
    return to_product_with_store(update_product(db, product, updates))


@router.delete("/{product_id}")
def remove_product(product_id: int, db: Session = Depends(get_db)):
    if not delete_product(db, product_id):
        raise HTTPException(status_code=404, detail="Product not found.")
    return {"success": True}


__all__ = ["router"]
