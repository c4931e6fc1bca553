"""API-key authentication for the feed endpoints.

The expected key is read from ``API_KEY`` on every request so tests can patch
the environment.  An unset key rejects all requests.
"""

import os
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

API_KEY_HEADER_NAME = "X-API-Key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER_NAME, auto_error=False)


def get_expected_api_key() -> str | None:
    return os.environ.get("API_KEY") or None


async def verify_api_key(
    api_key: Annotated[str | None, Depends(api_key_header)],
) -> str:
    expected = get_expected_api_key()
    if not expected or not api_key or not secrets.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return api_key
