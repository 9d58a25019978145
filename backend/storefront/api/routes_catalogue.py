import math
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from sqlalchemy.orm import Session
from storefront.config import settings
from storefront.db import get_db
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product_schema import ProductOut, ProductPage

router = APIRouter(tags=["catalogue"])

@router.get("", summary="List products", response_model=ProductPage)
def list_products(
    q: Optional[str] = Query(None, description="search term"),
    page: int = Query(1, ge=1),
    size: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
):
    size = size or settings.PRODUCTS_PER_PAGE
    q = q.strip() if q else None
    repo = ProductRepository(db)
    items, total = repo.list(q=q or None, page=page, size=size)
    return ProductPage(
        items=[ProductOut.model_validate(p) for p in items],
        total=total,
        page=page,
        size=size,
        total_pages=math.ceil(total / size) if total else 0,
    )

@router.get("/{product_id}", summary="Get product", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    repo = ProductRepository(db)
    p = repo.get(product_id)
    if not p:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductOut.model_validate(p)
