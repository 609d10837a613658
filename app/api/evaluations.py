"""
Session evaluation endpoints

The phase of an evaluation is always recomputed from its week number on save;
any phase sent by the client is ignored.
"""
from typing import List, Literal, Optional
from fastapi import APIRouter, HTTPException

from app.database.schemas import SessionEvaluation, Phase
from app.database import storage as database
from app.services.progress.computation import filter_evaluations
from app.services.utils import new_id, utc_now

router = APIRouter()


def _find_evaluation(data, evaluation_id: str):
    return next((e for e in data.evaluations if e.id == evaluation_id), None)


@router.get("/evaluations", response_model=List[SessionEvaluation])
async def list_evaluations(
    student_id: Optional[str] = None,
    phase: Optional[Phase] = None,
    sort_by: Literal["date", "week", "rating"] = "date",
):
    """
    List evaluations, optionally filtered by student and phase

    Sorted newest date first by default; 'week' and 'rating' sort descending too.
    """
    data = database.get_store().load()
    return filter_evaluations(data.evaluations, student_id=student_id, phase=phase, sort_by=sort_by)


@router.post("/evaluations", response_model=SessionEvaluation)
async def create_evaluation(evaluation: SessionEvaluation):
    """
    Record a session evaluation

    Generates an ID when none is supplied. The student ID is not checked
    against the student list. Returns 409 if the ID is already taken.
    """
    if not evaluation.id:
        evaluation.id = new_id()
    evaluation.created_at = utc_now()
    try:
        data = database.get_store().add_evaluation(evaluation)
    except database.DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _find_evaluation(data, evaluation.id)


@router.get("/evaluations/{evaluation_id}", response_model=SessionEvaluation)
async def get_evaluation(evaluation_id: str):
    evaluation = _find_evaluation(database.get_store().load(), evaluation_id)
    if not evaluation:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return evaluation


@router.put("/evaluations/{evaluation_id}", response_model=SessionEvaluation)
async def update_evaluation(evaluation_id: str, evaluation: SessionEvaluation):
    """
    Replace an evaluation by ID

    Keeps the original created_at. Unknown IDs are never inserted; 404 is returned.
    """
    store = database.get_store()
    existing = _find_evaluation(store.load(), evaluation_id)
    evaluation.id = evaluation_id
    if existing:
        evaluation.created_at = existing.created_at

    data = store.update_evaluation(evaluation)
    updated = _find_evaluation(data, evaluation_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return updated


@router.delete("/evaluations/{evaluation_id}")
async def delete_evaluation(evaluation_id: str):
    store = database.get_store()
    if not _find_evaluation(store.load(), evaluation_id):
        raise HTTPException(status_code=404, detail="Evaluation not found")
    store.delete_evaluation(evaluation_id)
    return {"message": "Evaluation deleted successfully"}
