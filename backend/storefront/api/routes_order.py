from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.db import get_db
from storefront.schemas.cart_schema import CheckoutOut
from storefront.services.cart_service import CartService
from storefront.utils.auth import Identity, get_current_identity

router = APIRouter(tags=["orders"])

@router.post("", summary="Place order (checkout)", response_model=CheckoutOut)
def create_order(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    # placeholder order: bill the cart and empty it, nothing is persisted
    total = CartService(db).checkout(identity)
    return CheckoutOut(success=True, total=total)
