"""
Utility functions shared by services and API routes
"""
import uuid
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current time as a timezone-aware UTC datetime
    """
    return datetime.now(timezone.utc)


def today_iso() -> str:
    """
    Today's date as YYYY-MM-DD (used for export file names)
    """
    return utc_now().date().isoformat()


def new_id() -> str:
    """
    Generate an opaque unique record id
    """
    return str(uuid.uuid4())
