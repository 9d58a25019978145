from storefront.db import get_db
from storefront.schemas.cart_schema import CartDeltaIn, CartMutationOut, CartOut, SetQuantityIn
from storefront.services.cart_service import CartService
from storefront.utils.auth import Identity, get_current_identity
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", summary="Get cart", response_model=CartOut)
def get_cart(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return CartService(db).get_cart(identity)


@router.post("", summary="Add to cart or adjust by a signed quantity", response_model=CartMutationOut)
def add_to_cart(
    payload: CartDeltaIn,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return CartService(db).apply_delta(identity, payload.product_id, payload.quantity)


@router.put("/items/{product_id}", summary="Set item quantity", response_model=CartMutationOut)
def set_quantity(
    product_id: str,
    payload: SetQuantityIn,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return CartService(db).set_quantity(identity, product_id, payload.quantity)


@router.delete("/items/{product_id}", summary="Remove item", response_model=CartOut)
def remove_item(
    product_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return CartService(db).remove(identity, product_id)
