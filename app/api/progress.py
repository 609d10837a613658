"""
Progress and reference endpoints

Read-only views derived from the stored evaluations.
"""
from fastapi import APIRouter, HTTPException

from app.database.schemas import DashboardSummary, StudentProgress
from app.database import storage as database
from app.services.progress.computation import dashboard_summary, student_progress
from app.services import reference

router = APIRouter()


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard():
    """
    Headline statistics across all students and evaluations
    """
    return dashboard_summary(database.get_store().load())


@router.get("/progress/{student_id}", response_model=StudentProgress)
async def get_student_progress(student_id: str):
    """
    Phase breakdown, trend, timeline and coverage for one student
    """
    progress = student_progress(database.get_store().load(), student_id)
    if progress is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return progress


@router.get("/reference")
async def get_reference_tables():
    """
    Static taxonomies used by the evaluation form
    """
    return {
        "scoreLabels": reference.SCORE_LABELS,
        "scoreCategories": reference.SCORE_CATEGORIES,
        "sessionTypes": reference.SESSION_TYPES,
        "phases": reference.PHASE_CONFIG,
        "teachingTopicCategories": reference.TEACHING_TOPIC_CATEGORIES,
        "conditions": reference.PREPOPULATED_CONDITIONS,
        "clinicalObjectives": reference.CLINICAL_OBJECTIVES,
        "clinicalObjectivesV2": reference.CLINICAL_OBJECTIVES_V2,
        "totalObjectiveExpectations": reference.TOTAL_OBJECTIVE_EXPECTATIONS,
        "clinicalSkills": reference.CLINICAL_SKILLS,
    }
