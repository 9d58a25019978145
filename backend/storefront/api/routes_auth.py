from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.db import get_db
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.auth_schema import SignInIn, TokenOut, UserOut
from storefront.services.errors import Unauthenticated
from storefront.utils.auth import Identity, create_access_token, get_current_identity
from storefront.utils.log import get_logger
from storefront.utils.transactions import smart_transaction

router = APIRouter(prefix="/api/auth", tags=["auth"])

log = get_logger("auth")


@router.post("/signin", summary="Sign in with demo credentials", response_model=TokenOut)
def signin(payload: SignInIn, db: Session = Depends(get_db)):
    """
    Demo credentials provider: any non-empty password is accepted and the
    user is created on first sign-in. Passwords are never stored.
    """
    email = payload.email.strip().lower()
    with smart_transaction(db):
        user = UserRepository(db).get_or_create(email, payload.name)
    log.info("signed in %s", user.id)
    return TokenOut(
        access_token=create_access_token(user.id, user.email),
        user=UserOut.model_validate(user),
    )


@router.get("/me", summary="Current user", response_model=UserOut)
def me(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    user = UserRepository(db).get(identity.user_id)
    if not user:
        raise Unauthenticated("Unknown user")
    return UserOut.model_validate(user)
