# src/agentcart/core/security.py
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader
from slowapi import Limiter
from slowapi.util import get_remote_address

from agentcart.core.config import Settings, get_settings

_API_KEY_HEADER_NAME = "X-API-Key"
_API_KEY_HEADER = APIKeyHeader(name=_API_KEY_HEADER_NAME, auto_error=True)


async def get_tenant_id(
    api_key: str = Security(_API_KEY_HEADER),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    FastAPI Dependency: Validiert den API-Key und gibt die Tenant-ID zurück.
    Die Tenant-ID bestimmt, welche Such-Session (Cache + Verlauf) verwendet wird.
    Wirft HTTP 401 bei ungültigem Key.
    """
    tenant_id = settings.api_keys.get(api_key)
    if tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
            headers={"WWW-Authenticate": "ApiKey"},
        )
    return tenant_id


def rate_limit_key(request: Request) -> str:
    """Limits gelten pro API-Key, ohne Key pro Client-Adresse."""
    return request.headers.get(_API_KEY_HEADER_NAME) or get_remote_address(request)


def search_rate_limit() -> str:
    # Wird pro Request ausgewertet
    settings = get_settings()
    return f"{settings.rate_limit_requests}/{settings.rate_limit_window_seconds} seconds"


limiter = Limiter(key_func=rate_limit_key)
