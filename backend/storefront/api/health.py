from fastapi import APIRouter, Request
from sqlalchemy.exc import SQLAlchemyError

from storefront.utils.log import get_logger

router = APIRouter()

log = get_logger("health")


@router.get("/health", tags=["health"])
def health(request: Request):
    db_ok = False
    database = getattr(request.app.state, "database", None)
    if database is not None:
        try:
            db_ok = database.ping()
        except SQLAlchemyError as e:
            log.warning("database ping failed: %s", e)

    return {
        "status": "ok" if db_ok else "degraded",
        "db": db_ok,
    }
