import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends

from app.core.security import create_access_token, issue_credential, verify_admin
from app.models.db_models import UserCreate, UserIn
from app.services import user_service
from app.services.db_service import RecordStore, get_store

router = APIRouter()

@router.get("/jwt")
async def get_token(email: Optional[str] = None, store: RecordStore = Depends(get_store)):
    token = await issue_credential(store, email)
    return {"accessToken": token}

@router.post("/user")
async def create_user(req: UserCreate, store: RecordStore = Depends(get_store)):
    return await user_service.create_user(store, req.model_dump(exclude_none=True))

@router.put("/user/{email}")
async def upsert_user(email: str, req: UserIn, store: RecordStore = Depends(get_store)):
    """Called on every login/signup: stores the profile and hands back a fresh token."""
    result = await user_service.upsert_user(store, email, req.model_dump(exclude_none=True))
    token = create_access_token(email)
    return {"result": result, "token": token}

@router.get("/user")
@router.get("/users")
async def list_users(store: RecordStore = Depends(get_store)) -> List[dict]:
    return await user_service.list_users(store)

@router.put("/user/admin/{user_id}")
async def make_admin(
    user_id: uuid.UUID,
    _: str = Depends(verify_admin),
    store: RecordStore = Depends(get_store),
):
    return await user_service.make_admin(store, str(user_id))

@router.get("/user/admin/{email}")
async def check_admin(email: str, store: RecordStore = Depends(get_store)):
    return {"admin": await user_service.is_admin(store, email)}

@router.delete("/user/{user_id}")
async def delete_user(
    user_id: uuid.UUID,
    _: str = Depends(verify_admin),
    store: RecordStore = Depends(get_store),
):
    deleted = await user_service.delete_user(store, str(user_id))
    return {"deletedCount": deleted}
