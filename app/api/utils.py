"""
Utility functions for API endpoints
"""
from fastapi import Request, HTTPException


def get_bearer_token(request: Request) -> str:
    """
    Extract the cloud-storage access token from the Authorization header

    The token is opaque to this service and only forwarded to the remote store.
    Raises HTTPException with 401 status if the header is missing or malformed.
    """
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization: Bearer <token> header. A Google Drive access token is required for sync."
        )
    return token.strip()
