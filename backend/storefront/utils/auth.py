from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.config import settings
from storefront.services.errors import Unauthenticated

ALGORITHM = "HS256"

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """An authenticated shopper, as vouched for by a verified access token."""

    user_id: str
    email: Optional[str] = None

    def __post_init__(self):
        if not self.user_id or not str(self.user_id).strip():
            raise Unauthenticated("Identity requires a user id")


def create_access_token(user_id: str, email: Optional[str] = None, expires_minutes: Optional[int] = None) -> str:
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {"sub": user_id, "email": email, "exp": expires}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthenticated("Invalid token")
    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated("Invalid token")
    return Identity(user_id=user_id, email=payload.get("email"))


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Unauthorized")
    return decode_access_token(credentials.credentials)
