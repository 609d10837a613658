"""
Google Drive sync adapter

Moves the exported document text to and from a named file in the user's
Google Drive. The caller supplies an OAuth access token (opaque bearer token);
this module never performs the OAuth flow itself.

Text is transferred unchanged in both directions. Failures surface
immediately as TransportError; there is no retry or backoff.
"""
import json
import logging
from typing import Any, Dict, Optional
import httpx

from app.core.config import DRIVE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

DRIVE_FILES_URL = "https://www.googleapis.com/drive/v3/files"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"


class TransportError(RuntimeError):
    """Network or authorization failure while talking to the remote store"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GoogleDriveConnector:
    """
    Save/load a JSON document to a Drive file identified by name
    """

    def __init__(
        self,
        access_token: str,
        timeout: float = DRIVE_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not access_token:
            raise TransportError("Missing Google Drive access token", status_code=401)
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self.access_token}"},
        )

    async def _request(self, client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException:
            logger.warning(f"Timeout calling Google Drive ({method} {url})")
            raise TransportError("Google Drive did not respond in time")
        except httpx.HTTPError as e:
            logger.warning(f"Error calling Google Drive ({method} {url}): {str(e)}")
            raise TransportError(f"Could not reach Google Drive: {str(e)}")

        if response.status_code in (401, 403):
            raise TransportError(
                "Google Drive rejected the access token. Reconnect your Google account and try again.",
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            logger.warning(f"Google Drive returned status {response.status_code} for {method} {url}")
            raise TransportError(
                f"Google Drive request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def find_file(self, file_name: str) -> Optional[Dict[str, Any]]:
        """
        Find the first non-trashed file with this exact name

        Returns:
            Dict with 'id' and 'name', or None if no such file exists
        """
        params = {
            "q": f"name='{_escape_query(file_name)}' and trashed=false",
            "fields": "files(id, name)",
            "spaces": "drive",
        }
        async with self._client() as client:
            response = await self._request(client, "GET", DRIVE_FILES_URL, params=params)
        files = _json_body(response).get("files", [])
        return files[0] if files else None

    async def save(self, text: str, file_name: str) -> str:
        """
        Upload document text, replacing the named file if it already exists

        Returns:
            Drive file id
        """
        existing = await self.find_file(file_name)
        body = text.encode("utf-8")

        async with self._client() as client:
            if existing:
                response = await self._request(
                    client,
                    "PATCH",
                    f"{DRIVE_UPLOAD_URL}/{existing['id']}",
                    params={"uploadType": "media"},
                    headers={"Content-Type": "application/json"},
                    content=body,
                )
            else:
                metadata = {"name": file_name, "mimeType": "application/json"}
                response = await self._request(
                    client,
                    "POST",
                    DRIVE_UPLOAD_URL,
                    params={"uploadType": "multipart"},
                    files={
                        "metadata": (None, json.dumps(metadata), "application/json"),
                        "file": (file_name, body, "application/json"),
                    },
                )

        file_id = _json_body(response).get("id")
        if not file_id:
            raise TransportError("Google Drive did not return a file id")
        print(f"[Drive Sync] Saved {len(body)} bytes to '{file_name}' (id={file_id})")
        return file_id

    async def load(self, file_name: str) -> Optional[str]:
        """
        Download the named file's text

        Returns:
            Document text, or None if no such file exists
        """
        existing = await self.find_file(file_name)
        if not existing:
            return None

        async with self._client() as client:
            response = await self._request(
                client,
                "GET",
                f"{DRIVE_FILES_URL}/{existing['id']}",
                params={"alt": "media"},
            )
        try:
            text = response.content.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning(f"Google Drive file '{file_name}' is not UTF-8 text")
            raise TransportError("Google Drive returned an unreadable response")
        print(f"[Drive Sync] Loaded {len(response.content)} bytes from '{file_name}' (id={existing['id']})")
        return text


def _json_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        logger.warning(f"Google Drive returned a non-JSON body for {response.request.method} {response.request.url}")
        raise TransportError("Google Drive returned an unreadable response")
    if not isinstance(body, dict):
        raise TransportError("Google Drive returned an unreadable response")
    return body


def _escape_query(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def get_drive_connector(access_token: str) -> GoogleDriveConnector:
    """
    Build a connector for one request's access token
    """
    return GoogleDriveConnector(access_token)
