"""
Wire encoding of the subscription manifest.

The sidecar polls the application's subscribe endpoint and expects a JSON
array with one object per topic:

    [
      {"pubsubname": "pubsub", "topic": "orders", "route": "/orders"},
      {"pubsubname": "pubsub", "topic": "payments",
       "routes": {"rules": [{"match": "...", "path": "/vip"}], "default": "/payments"},
       "deadLetterTopic": "poison", "metadata": {"rawPayload": "true"},
       "bulkSubscribe": {"enabled": true, "maxMessagesCount": 100}}
    ]

``route`` and ``routes`` never appear together. Unset optional fields and
empty metadata are omitted. Output is compact and byte-stable for a given
registry state.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from topicmanifest.exceptions import ManifestDecodeError
from topicmanifest.serialization import json_dumps, json_loads
from topicmanifest.subscriptions.models import SubscriptionManifestEntry

if TYPE_CHECKING:
    from topicmanifest.subscriptions.registry import SubscriptionRegistry


def manifest_to_wire(entries: Iterable[SubscriptionManifestEntry]) -> list[dict[str, Any]]:
    """Convert entries to the list of JSON-ready mappings served to the sidecar."""
    return [entry.to_wire() for entry in entries]


def dumps_manifest(entries: Iterable[SubscriptionManifestEntry]) -> str:
    """Serialize entries to the manifest JSON text."""
    return json_dumps(manifest_to_wire(entries))


def encode_manifest(entries: Iterable[SubscriptionManifestEntry]) -> bytes:
    """Serialize entries to UTF-8 encoded manifest JSON."""
    return dumps_manifest(entries).encode("utf-8")


def render_manifest_json(registry: SubscriptionRegistry) -> bytes:
    """Render the registry's current state as the encoded manifest."""
    return encode_manifest(registry.render_manifest())


def loads_manifest(data: str | bytes) -> list[SubscriptionManifestEntry]:
    """
    Parse manifest JSON back into entries.

    Args:
        data: Manifest JSON text or UTF-8 bytes

    Returns:
        Entries in document order

    Raises:
        ManifestDecodeError: If the document is not valid JSON, is not an
            array, or an element does not have the manifest shape
    """
    try:
        document = json_loads(data)
    except (ValueError, UnicodeDecodeError) as e:
        raise ManifestDecodeError(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(document, list):
        raise ManifestDecodeError(
            f"Manifest must be a JSON array, got {type(document).__name__}"
        )

    entries: list[SubscriptionManifestEntry] = []
    for index, item in enumerate(document):
        if not isinstance(item, dict):
            raise ManifestDecodeError(
                f"Manifest element {index} must be an object, got {type(item).__name__}"
            )
        try:
            entries.append(SubscriptionManifestEntry.from_wire(item))
        except ValidationError as e:
            raise ManifestDecodeError(f"Manifest element {index} is malformed: {e}") from e
    return entries


__all__ = [
    "manifest_to_wire",
    "dumps_manifest",
    "encode_manifest",
    "render_manifest_json",
    "loads_manifest",
]
