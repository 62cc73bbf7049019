"""
Path-prefix reverse proxy in front of the backend services.

``/api/<prefix>/...`` is forwarded to the service owning ``<prefix>`` with the
``/api`` segment removed. The gateway never inspects tokens; the Authorization
header travels to the backend unchanged.
"""
import logging

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from core.config import Settings, get_settings
from core.http_client import get_http_client
from services.exceptions import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gateway"])

# Hop-by-hop headers plus those httpx recomputes for the decoded body
EXCLUDED_REQUEST_HEADERS = {"host", "content-length", "connection", "transfer-encoding"}
EXCLUDED_RESPONSE_HEADERS = {
    "content-encoding",
    "content-length",
    "connection",
    "transfer-encoding",
}

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def resolve_upstream(prefix: str, settings: Settings) -> str | None:
    """Base URL of the service that owns ``prefix``, or None if no service does."""
    routes = {
        "auth": settings.auth_service_url,
        "users": settings.user_service_url,
        "properties": settings.property_service_url,
        "favorites": settings.property_service_url,
    }
    base_url = routes.get(prefix)
    return base_url.rstrip("/") if base_url else None


async def forward(
    request: Request,
    prefix: str,
    path: str,
    http_client: httpx.AsyncClient,
    settings: Settings,
) -> Response:
    """
    Forward the request and relay the backend's response as-is.

    Raises:
        NotFoundError: If no backend owns ``prefix``.
    """
    base_url = resolve_upstream(prefix, settings)
    if base_url is None:
        raise NotFoundError("Route not found")

    url = f"{base_url}/{prefix}/{path}" if path else f"{base_url}/{prefix}"
    headers = {
        key: value
        for key, value in request.headers.items()
        if key.lower() not in EXCLUDED_REQUEST_HEADERS
    }

    try:
        upstream = await http_client.request(
            request.method,
            url,
            params=list(request.query_params.multi_items()),
            headers=headers,
            content=await request.body(),
            timeout=settings.http_timeout,
        )
    except httpx.HTTPError as e:
        logger.error("Proxy to %s failed: %s", url, e)
        return JSONResponse(
            status_code=502,
            content={"error": "Bad gateway", "details": str(e)},
        )

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers={
            key: value
            for key, value in upstream.headers.items()
            if key.lower() not in EXCLUDED_RESPONSE_HEADERS
        },
    )


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "OK"}


@router.api_route("/api/{prefix}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy_root(
    request: Request,
    prefix: str,
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> Response:
    return await forward(request, prefix, "", http_client, settings)


@router.api_route("/api/{prefix}/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(
    request: Request,
    prefix: str,
    path: str,
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> Response:
    return await forward(request, prefix, path, http_client, settings)
