# finance_app/api/v1/deps.py
import logging
import uuid
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.ext.asyncio import AsyncSession

from finance_app.core.security import _parse_and_validate_session_data
from finance_app.core.config import settings
from finance_app.db.database import get_async_db
from finance_app.db.models.user import User as UserModel
from finance_app import crud

logger = logging.getLogger(__name__)


class AuthContext:
    def __init__(self, user: UserModel, auth_date: Optional[int] = None):
        self.user = user
        self.auth_date = auth_date

    @property
    def owner_user_id(self) -> uuid.UUID:
        # Everything in the app is owned by exactly one user
        return self.user.id


async def get_auth_context(
    session_data_header: Optional[str] = Header(None, alias="X-Session-Data"),
    db: AsyncSession = Depends(get_async_db)
) -> AuthContext:
    """
    FastAPI dependency: verify the signed session and return the caller's context.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Session"},
    )

    if session_data_header is None:
        logger.info("Auth failed: missing X-Session-Data header")
        raise credentials_exception

    validated_data = _parse_and_validate_session_data(
        session_data=session_data_header,
        secret=settings.SESSION_SECRET,
        expiration_hours=settings.SESSION_MAX_AGE_HOURS,
    )
    if not validated_data or not validated_data.get("_valid"):
        raise credentials_exception

    try:
        user_id = uuid.UUID(validated_data["user_id"])
    except ValueError:
        logger.info("Auth failed: user_id claim is not a UUID")
        raise credentials_exception

    try:
        current_user = await crud.crud_user.get_or_create_or_update_user_from_session(
            db=db,
            user_id=user_id,
            email=validated_data.get("email"),
            name=validated_data.get("name"),
        )
    except Exception:
        logger.exception("Auth failed: error processing user %s in DB", user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database error processing user")

    return AuthContext(user=current_user, auth_date=int(validated_data["auth_date"]))


def get_now() -> datetime:
    """Current instant in the zone budgets are evaluated in. Overridable in tests."""
    return datetime.now(ZoneInfo(settings.BUDGET_TIMEZONE))
