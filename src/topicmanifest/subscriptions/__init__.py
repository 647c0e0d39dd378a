"""
Topic subscription registry and manifest rendering.

This module provides:
- TopicKey, SubscriptionRule, BulkSubscribeConfig: declaration types
- SubscriptionBuilder: per-topic accumulator enforcing topic invariants
- SubscriptionRegistry: thread-safe map of topics to builders
- SubscriptionManifestEntry and friends: the manifest served to the sidecar
- Manifest encoding and decoding helpers

Example:
    >>> from topicmanifest.subscriptions import SubscriptionRegistry, encode_manifest
    >>>
    >>> registry = SubscriptionRegistry()
    >>> registry.register("pubsub", "orders", "/orders")
    >>> encode_manifest(registry.render_manifest())
    b'[{"pubsubname":"pubsub","topic":"orders","route":"/orders"}]'
"""

from topicmanifest.subscriptions.builder import SubscriptionBuilder
from topicmanifest.subscriptions.manifest import (
    dumps_manifest,
    encode_manifest,
    loads_manifest,
    manifest_to_wire,
    render_manifest_json,
)
from topicmanifest.subscriptions.models import (
    BulkSubscribe,
    BulkSubscribeConfig,
    SubscriptionManifestEntry,
    SubscriptionRule,
    TopicKey,
    TopicRoutes,
    TopicRule,
)
from topicmanifest.subscriptions.registry import SubscriptionRegistry, default_registry

__all__ = [
    # Declarations
    "TopicKey",
    "SubscriptionRule",
    "BulkSubscribeConfig",
    # Accumulation
    "SubscriptionBuilder",
    "SubscriptionRegistry",
    "default_registry",
    # Manifest
    "SubscriptionManifestEntry",
    "TopicRoutes",
    "TopicRule",
    "BulkSubscribe",
    "manifest_to_wire",
    "dumps_manifest",
    "encode_manifest",
    "render_manifest_json",
    "loads_manifest",
]
