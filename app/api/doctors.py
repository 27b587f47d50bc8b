import uuid
from typing import List

from fastapi import APIRouter, Depends

from app.core.security import verify_admin
from app.models.db_models import DoctorIn
from app.services import doctor_service
from app.services.db_service import RecordStore, get_store

# Every doctor route is admin only
router = APIRouter(dependencies=[Depends(verify_admin)])

@router.post("/doctor")
async def add_doctor(req: DoctorIn, store: RecordStore = Depends(get_store)):
    return await doctor_service.add_doctor(store, req.model_dump(exclude_none=True))

@router.get("/doctors")
async def list_doctors(store: RecordStore = Depends(get_store)) -> List[dict]:
    return await doctor_service.list_doctors(store)

@router.delete("/doctor/{doctor_id}")
async def delete_doctor(doctor_id: uuid.UUID, store: RecordStore = Depends(get_store)):
    deleted = await doctor_service.delete_doctor(store, str(doctor_id))
    return {"deletedCount": deleted}
