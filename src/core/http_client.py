"""Process-wide httpx client used for service-to-service calls."""
import httpx
from fastapi import Request

from core.config import Settings


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """
    Create the shared client stored on ``app.state`` during the lifespan.

    Individual calls still pass their own timeout; this default only covers
    callers that do not.
    """
    return httpx.AsyncClient(timeout=settings.http_timeout)


def get_http_client(request: Request) -> httpx.AsyncClient:
    """FastAPI dependency returning the app's shared client."""
    return request.app.state.http_client
