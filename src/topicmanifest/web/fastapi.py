"""FastAPI integration serving the subscription manifest.

The sidecar polls the application's subscribe endpoint (``GET /dapr/subscribe``
by default) at startup to learn which topics to deliver and where. The
response is rendered from the registry at request time and returned fully
materialised.

Example:
    >>> from fastapi import FastAPI
    >>> from topicmanifest.web.fastapi import create_subscription_router
    >>>
    >>> app = FastAPI()
    >>> app.include_router(create_subscription_router(registry))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from topicmanifest.config import ManifestEndpointConfig
from topicmanifest.exceptions import FastAPINotAvailableError
from topicmanifest.subscriptions.manifest import render_manifest_json

if TYPE_CHECKING:
    from topicmanifest.subscriptions.registry import SubscriptionRegistry

# Optional fastapi import - fail gracefully if not installed
try:
    from fastapi import APIRouter, Response

    FASTAPI_AVAILABLE = True
except ImportError:
    FASTAPI_AVAILABLE = False
    APIRouter = None  # type: ignore[assignment, misc]
    Response = None  # type: ignore[assignment, misc]

logger = logging.getLogger(__name__)


def create_subscription_router(
    registry: SubscriptionRegistry,
    config: ManifestEndpointConfig | None = None,
) -> APIRouter:
    """
    Create a router exposing the manifest endpoint.

    Args:
        registry: Registry whose current state is served on every request
        config: Endpoint path and media type; defaults to ``/dapr/subscribe``

    Returns:
        An APIRouter to include in the application

    Raises:
        FastAPINotAvailableError: If FastAPI is not installed
    """
    if not FASTAPI_AVAILABLE:
        raise FastAPINotAvailableError()

    config = config or ManifestEndpointConfig()
    router = APIRouter(tags=["subscriptions"])

    @router.get(config.path, response_class=Response)
    def subscribe() -> Response:
        """Return the subscription manifest."""
        body = render_manifest_json(registry)
        logger.debug(
            "Served subscription manifest",
            extra={"path": config.path, "topics": len(registry), "bytes": len(body)},
        )
        return Response(content=body, media_type=config.media_type)

    return router


__all__ = [
    "FASTAPI_AVAILABLE",
    "create_subscription_router",
]
