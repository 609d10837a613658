# API routes
from fastapi import APIRouter
from app.api.preceptor import router as preceptor_router
from app.api.students import router as students_router
from app.api.evaluations import router as evaluations_router
from app.api.progress import router as progress_router
from app.api.export import router as export_router
from app.api.sync import router as sync_router

# Combine all routers
router = APIRouter()
router.include_router(preceptor_router)
router.include_router(students_router)
router.include_router(evaluations_router)
router.include_router(progress_router)
router.include_router(export_router)
router.include_router(sync_router)

__all__ = ["router"]
