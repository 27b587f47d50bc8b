from typing import List

from app.core.logger import logger
from app.services.db_service import DOCTORS, RecordStore


async def add_doctor(store: RecordStore, doctor: dict) -> dict:
    created = await store.insert_one(DOCTORS, doctor)
    logger.info(f"🩺 Doctor added: {created.get('name')} ({created.get('specialty')})")
    return created


async def list_doctors(store: RecordStore) -> List[dict]:
    return await store.find(DOCTORS)


async def delete_doctor(store: RecordStore, doctor_id: str) -> int:
    deleted = await store.delete(DOCTORS, {"id": doctor_id})
    logger.info(f"🗑️ Doctor {doctor_id} deleted ({deleted} row(s))")
    return deleted
