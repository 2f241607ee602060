"""x-api-key check for the event intake endpoint.

Device agents post events with a shared key from NETRA_API_KEY. The key is
read per request so a rotated value in the environment takes effect without
a restart."""

import os
import secrets
from typing import Optional

from dotenv import load_dotenv
from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

load_dotenv()

API_KEY_HEADER = "x-api-key"
DEV_API_KEY = "netra-dev-key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def expected_api_key() -> str:
    return os.getenv("NETRA_API_KEY", DEV_API_KEY)


async def require_device_key(api_key: Optional[str] = Security(api_key_header)) -> str:
    """Reject the request with 401 unless the header matches the shared key."""
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing '{API_KEY_HEADER}' header.",
        )
    # str compare_digest rejects non-ASCII; headers arrive latin-1 decoded
    if not secrets.compare_digest(api_key.encode("utf-8"), expected_api_key().encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key.",
        )
    return api_key
