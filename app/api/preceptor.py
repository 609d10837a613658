"""
Preceptor profile endpoints
"""
from fastapi import APIRouter

from app.database.schemas import PreceptorProfile
from app.database import storage as database

router = APIRouter()


@router.get("/preceptor", response_model=PreceptorProfile)
async def get_preceptor():
    """
    Get the preceptor profile (empty fields until first saved)
    """
    return database.get_store().load().preceptor


@router.put("/preceptor", response_model=PreceptorProfile)
async def replace_preceptor(profile: PreceptorProfile):
    """
    Replace the preceptor profile wholesale
    """
    data = database.get_store().replace_preceptor(profile)
    return data.preceptor
