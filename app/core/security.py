"""
Credential service and access guard.

Gates are FastAPI dependencies applied in order: verify_jwt (who are you),
then verify_admin (what may you do). Both raise before the handler runs.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header
from jose import JWTError, jwt

from app.core.config import settings
from app.core.errors import Forbidden, InvalidCredential, Unauthenticated, UnknownPrincipal
from app.core.logger import logger
from app.services import user_service
from app.services.db_service import RecordStore, get_store


def create_access_token(email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Signs a credential carrying the `email` claim. Every token expires."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Returns the email claim. Raises InvalidCredential for bad, expired or claimless tokens."""
    try:
        payload = jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"⚠️ JWT verification failed: {e}")
        raise InvalidCredential() from e

    email = payload.get("email")
    if not email:
        raise InvalidCredential()
    return email


async def issue_credential(store: RecordStore, email: str) -> str:
    """Issues a token only for emails that belong to a stored user."""
    user = await user_service.find_user_by_email(store, email)
    if not user:
        logger.warning(f"⚠️ Token requested for unknown email: {email}")
        raise UnknownPrincipal()
    return create_access_token(email)


async def verify_jwt(authorization: Optional[str] = Header(None)) -> str:
    """Token gate. Absence is 401, anything else wrong is 403."""
    if not authorization:
        raise Unauthenticated()

    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        raise InvalidCredential()

    return decode_access_token(parts[1])


async def verify_admin(
    email: str = Depends(verify_jwt),
    store: RecordStore = Depends(get_store),
) -> str:
    """Role gate, runs after verify_jwt."""
    user = await user_service.find_user_by_email(store, email)
    if not user or user.get("role") != "admin":
        logger.warning(f"⚠️ Admin access denied for {email}")
        raise Forbidden()
    return email


def ensure_self_access(requested_email: Optional[str], principal_email: str):
    if requested_email != principal_email:
        logger.warning(f"⚠️ {principal_email} tried to read data of {requested_email}")
        raise Forbidden()
