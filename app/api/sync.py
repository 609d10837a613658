"""
Cloud sync endpoints

Save/load the exported document to the user's Google Drive. The client sends
its Google access token as 'Authorization: Bearer <token>'.
"""
from typing import Optional
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from app.core.config import DRIVE_FILE_NAME
from app.database import storage as database
from app.api.utils import get_bearer_token
from app.services.sync import drive

router = APIRouter()


class DriveSyncRequest(BaseModel):
    file_name: Optional[str] = None


class DriveSyncResult(BaseModel):
    status: str
    file_name: str
    file_id: Optional[str] = None
    message: str


def _transport_http_error(e: drive.TransportError) -> HTTPException:
    status_code = 401 if e.status_code in (401, 403) else 502
    return HTTPException(status_code=status_code, detail=str(e))


@router.post("/sync/drive/save", response_model=DriveSyncResult)
async def save_to_drive(request: Request, body: Optional[DriveSyncRequest] = None):
    """
    Upload the current document to Google Drive (creates or overwrites the file)
    """
    token = get_bearer_token(request)
    file_name = (body.file_name if body else None) or DRIVE_FILE_NAME
    text = database.get_store().export_snapshot()

    try:
        file_id = await drive.get_drive_connector(token).save(text, file_name)
    except drive.TransportError as e:
        raise _transport_http_error(e)

    return DriveSyncResult(status="saved", file_name=file_name, file_id=file_id, message="Saved to Google Drive")


@router.post("/sync/drive/load", response_model=DriveSyncResult)
async def load_from_drive(request: Request, body: Optional[DriveSyncRequest] = None):
    """
    Replace all data with the document stored on Google Drive

    Returns status 'not_found' (and changes nothing) when the file does not exist.
    """
    token = get_bearer_token(request)
    file_name = (body.file_name if body else None) or DRIVE_FILE_NAME

    try:
        text = await drive.get_drive_connector(token).load(file_name)
    except drive.TransportError as e:
        raise _transport_http_error(e)

    if text is None:
        return DriveSyncResult(status="not_found", file_name=file_name, message="No saved data found on Google Drive")

    try:
        database.get_store().import_snapshot(text)
    except database.ImportParseError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return DriveSyncResult(status="loaded", file_name=file_name, message="Loaded from Google Drive")
