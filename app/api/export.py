"""
Export and import endpoints

- Export returns the whole document as pretty-printed JSON (file download)
- Import replaces the whole document; nothing is merged
- Text is passed through unchanged so exported files re-import exactly
"""
from fastapi import APIRouter, HTTPException, Request, UploadFile, File
from fastapi.responses import Response

from app.database.schemas import AppData
from app.database import storage as database
from app.services.utils import today_iso

router = APIRouter()


def _import_text(text: str) -> AppData:
    try:
        return database.get_store().import_snapshot(text)
    except database.ImportParseError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/export")
async def export_data():
    """
    Download the full document as a JSON file
    """
    text = database.get_store().export_snapshot()
    filename = f"preceptor_evaluations_{today_iso()}.json"
    return Response(
        content=text.encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=AppData)
async def import_data(request: Request):
    """
    Replace all data with the JSON document in the request body

    Returns 422 and leaves stored data untouched if the body is not a valid document.
    """
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail="Import body must be UTF-8 encoded JSON")
    return _import_text(text)


@router.post("/import/file", response_model=AppData)
async def import_file(file: UploadFile = File(...)):
    """
    Replace all data with an uploaded JSON file
    """
    content = await file.read()
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail=f"File '{file.filename}' is not UTF-8 encoded JSON")
    return _import_text(text)


@router.delete("/data", response_model=AppData)
async def clear_data():
    """
    Delete all data and start over with an empty document
    """
    return database.get_store().clear()
