"""
Student management endpoints
"""
from typing import List
from fastapi import APIRouter, HTTPException

from app.database.schemas import StudentProfile
from app.database import storage as database
from app.services.utils import new_id

router = APIRouter()


def _find_student(data, student_id: str):
    return next((s for s in data.students if s.id == student_id), None)


@router.get("/students", response_model=List[StudentProfile])
async def list_students():
    """
    List all students in insertion order
    """
    return database.get_store().load().students


@router.post("/students", response_model=StudentProfile)
async def create_student(student: StudentProfile):
    """
    Add a student

    Generates an ID when none is supplied. Returns 409 if the ID is already taken.
    """
    if not student.id:
        student.id = new_id()
    try:
        data = database.get_store().add_student(student)
    except database.DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _find_student(data, student.id)


@router.get("/students/{student_id}", response_model=StudentProfile)
async def get_student(student_id: str):
    student = _find_student(database.get_store().load(), student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.put("/students/{student_id}", response_model=StudentProfile)
async def update_student(student_id: str, student: StudentProfile):
    """
    Replace a student by ID

    The store ignores unknown IDs, so nothing is written and 404 is returned.
    """
    student.id = student_id
    data = database.get_store().update_student(student)
    updated = _find_student(data, student_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Student not found")
    return updated


@router.delete("/students/{student_id}")
async def delete_student(student_id: str):
    """
    Delete a student and all of their evaluations
    """
    store = database.get_store()
    before = store.load()
    if not _find_student(before, student_id):
        raise HTTPException(status_code=404, detail="Student not found")

    data = store.delete_student(student_id)
    removed = len(before.evaluations) - len(data.evaluations)
    return {"message": "Student deleted successfully", "evaluations_deleted": removed}
