from typing import List, Optional

from fastapi import APIRouter, Depends

from app.services.availability import available_services
from app.services.db_service import SERVICES, RecordStore, get_store

router = APIRouter()

@router.get("/services")
async def list_services(store: RecordStore = Depends(get_store)) -> List[dict]:
    return await store.find(SERVICES)

@router.get("/available")
async def available(date: Optional[str] = None, store: RecordStore = Depends(get_store)) -> List[dict]:
    return await available_services(store, date)

@router.get("/appointments")
async def appointment_names(store: RecordStore = Depends(get_store)) -> List[dict]:
    # Only names, for the "specialty" picker on the client
    return await store.find(SERVICES, columns="id,name")
