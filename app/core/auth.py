from typing import Optional

from fastapi import Depends, HTTPException, Security
from fastapi.security import APIKeyHeader

from app.core.config import Settings, get_settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    api_key: Optional[str] = Security(api_key_header),
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """Enforce the static shared secret when VIDEO_PROXY_API_KEY is set."""
    if not settings.service_api_key:
        return api_key
    if not api_key or api_key != settings.service_api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
    return api_key
