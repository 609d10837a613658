"""
Sync service module

Transport adapters around the store's export/import snapshot text.
"""

from app.services.sync.drive import (
    GoogleDriveConnector,
    TransportError,
    get_drive_connector,
)

__all__ = [
    "GoogleDriveConnector",
    "TransportError",
    "get_drive_connector",
]
