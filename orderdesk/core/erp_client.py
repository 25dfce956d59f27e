# orderdesk/core/erp_client.py
import logging
from collections.abc import Iterator

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from orderdesk.core.auth import bearer_scheme
from orderdesk.core.config import get_settings

settings = get_settings()

logger = logging.getLogger(__name__)


def build_erp_client(token: str | None = None) -> httpx.Client:
    """
    Create an httpx client pointed at the ERP backend.

    The operator's own access token is forwarded so the backend applies
    its authoritative permission checks to every call we make on their
    behalf.
    """
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.Client(
        base_url=settings.ERP_API_BASE_URL,
        timeout=settings.ERP_API_TIMEOUT,
        headers=headers,
    )


def get_erp_client(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Iterator[httpx.Client]:
    """
    FastAPI dependency that yields a per-request ERP client.

    Usage:

        @router.get("/example")
        def example_endpoint(client: httpx.Client = Depends(get_erp_client)):
            ...
    """
    token = credentials.credentials if credentials else None
    with build_erp_client(token) as client:
        yield client


def erp_unavailable(action: str, exc: Exception) -> HTTPException:
    """
    Map a failed ERP call to the error we return to our own client.

    An upstream 4xx other than 404 keeps its status and message (e.g. the
    backend refusing an order); everything else becomes 502.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        upstream = exc.response.status_code
        logger.error(f"ERP call failed while {action}: HTTP {upstream}")
        if 400 <= upstream < 500:
            try:
                body = exc.response.json()
            except ValueError:
                body = None
            message = body.get("message") if isinstance(body, dict) else None
            return HTTPException(
                status_code=upstream,
                detail=message or f"ERP rejected the request while {action}",
            )
    else:
        logger.error(f"ERP call failed while {action}: {exc}")

    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"ERP backend unavailable while {action}",
    )
