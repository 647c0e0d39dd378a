"""
Web framework integrations serving the subscription manifest.

FastAPI support is optional: install ``topicmanifest-py[fastapi]`` and check
``FASTAPI_AVAILABLE`` before use.
"""

from topicmanifest.web.fastapi import FASTAPI_AVAILABLE, create_subscription_router

__all__ = [
    "FASTAPI_AVAILABLE",
    "create_subscription_router",
]
