from typing import List, Optional

from app.core.errors import DuplicateRecordError, NotFound
from app.core.logger import logger
from app.services.db_service import USERS, RecordStore

ADMIN_ROLE = "admin"


def _profile(values: dict) -> dict:
    """Strips fields a user may not set on themselves."""
    profile = dict(values)
    profile.pop("role", None)
    profile.pop("id", None)
    return profile


async def find_user_by_email(store: RecordStore, email: str) -> Optional[dict]:
    if not email:
        return None
    return await store.find_one(USERS, {"email": email})


async def create_user(store: RecordStore, values: dict) -> dict:
    """Inserts a user. A repeated signup for a stored email returns the stored row."""
    try:
        user = await store.insert_one(USERS, _profile(values))
    except DuplicateRecordError:
        logger.info(f"🔁 User already exists: {values['email']}")
        return await find_user_by_email(store, values["email"])
    logger.info(f"🆕 New user created: {user.get('email')}")
    return user


async def upsert_user(store: RecordStore, email: str, values: dict) -> dict:
    """Creates or updates the user identified by `email` (the path email wins over the body)."""
    profile = _profile(values)
    profile["email"] = email
    return await store.upsert_one(USERS, profile, on_conflict="email")


async def list_users(store: RecordStore) -> List[dict]:
    return await store.find(USERS)


async def make_admin(store: RecordStore, user_id: str) -> dict:
    updated = await store.update(USERS, {"id": user_id}, {"role": ADMIN_ROLE})
    if not updated:
        raise NotFound(f"User {user_id} not found")
    logger.info(f"👑 User {user_id} is now admin")
    return updated[0]


async def is_admin(store: RecordStore, email: str) -> bool:
    user = await find_user_by_email(store, email)
    return bool(user) and user.get("role") == ADMIN_ROLE


async def delete_user(store: RecordStore, user_id: str) -> int:
    deleted = await store.delete(USERS, {"id": user_id})
    logger.info(f"🗑️ User {user_id} deleted ({deleted} row(s))")
    return deleted
