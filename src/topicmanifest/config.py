"""
Configuration for handler discovery and the manifest endpoint.

This module provides:
- PlaceholderResolver: expands ``${name}`` / ``${name:default}`` in topic and
  pubsub names declared on handlers
- ManifestEndpointConfig: where and how the manifest is served
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

from topicmanifest.exceptions import PlaceholderResolutionError

logger = logging.getLogger(__name__)

# ${name} or ${name:default}; the default may be empty
PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")

DEFAULT_SUBSCRIBE_PATH = "/dapr/subscribe"


class PlaceholderResolver:
    """
    Expands placeholders in handler declarations.

    Values are looked up in the explicit mapping first, then in the process
    environment when ``use_environment`` is set. A placeholder with no value
    falls back to its default; without a default it is left untouched, or
    rejected when ``strict`` is set.

    Example:
        >>> resolver = PlaceholderResolver({"bus": "kafka"}, use_environment=False)
        >>> resolver.resolve("${bus}")
        'kafka'
        >>> resolver.resolve("${pubsubName:pubsub}")
        'pubsub'
        >>> resolver.resolve("orders-${env:dev}")
        'orders-dev'
    """

    def __init__(
        self,
        values: Mapping[str, str] | None = None,
        *,
        use_environment: bool = True,
        strict: bool = False,
    ) -> None:
        self._values = dict(values or {})
        self._use_environment = use_environment
        self._strict = strict

    def lookup(self, name: str) -> str | None:
        """Look up a raw value, or None if no source defines it."""
        if name in self._values:
            return self._values[name]
        if self._use_environment:
            return os.environ.get(name)
        return None

    def resolve(self, text: str) -> str:
        """
        Expand every placeholder in ``text``.

        Raises:
            PlaceholderResolutionError: In strict mode, for a placeholder with
                no value and no default
        """

        def replace(match: re.Match[str]) -> str:
            name = match.group(1).strip()
            default = match.group(2)
            value = self.lookup(name)
            if value is not None:
                return value
            if default is not None:
                return default
            if self._strict:
                raise PlaceholderResolutionError(match.group(0))
            logger.debug("Placeholder %s left unresolved", match.group(0))
            return match.group(0)

        return PLACEHOLDER_PATTERN.sub(replace, text)

    @property
    def strict(self) -> bool:
        return self._strict


@dataclass(frozen=True)
class ManifestEndpointConfig:
    """
    Configuration for serving the manifest.

    Attributes:
        path: Route the sidecar polls for subscriptions
        media_type: Content type of the response

    Example:
        >>> config = ManifestEndpointConfig(path="/dapr/subscribe")
    """

    path: str = DEFAULT_SUBSCRIBE_PATH
    media_type: str = "application/json"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.path.startswith("/"):
            raise ValueError(
                f"path must start with '/', got {self.path!r}. "
                f"Use a value like '{DEFAULT_SUBSCRIBE_PATH}' (default)."
            )

        if not self.media_type:
            raise ValueError("media_type must not be empty.")


__all__ = [
    "DEFAULT_SUBSCRIBE_PATH",
    "PLACEHOLDER_PATTERN",
    "ManifestEndpointConfig",
    "PlaceholderResolver",
]
