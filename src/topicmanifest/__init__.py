"""
topicmanifest - Declarative pub/sub subscriptions for sidecar runtimes.

This library provides:
- @topic / @bulk_subscribe decorators for declaring topic handlers
- Discovery that registers those declarations in a SubscriptionRegistry
- Per-topic invariants: one default route, one dead letter topic,
  unique rule priorities
- Deterministic rendering of the subscription manifest the sidecar polls
- Optional FastAPI router serving the manifest
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("topicmanifest-py")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from topicmanifest.config import ManifestEndpointConfig, PlaceholderResolver
from topicmanifest.exceptions import (
    DeadLetterTopicConflictError,
    DefaultRouteConflictError,
    DuplicateRulePriorityError,
    FastAPINotAvailableError,
    InvalidBulkSubscribeError,
    InvalidTopicKeyError,
    ManifestDecodeError,
    MetadataParseError,
    PlaceholderResolutionError,
    SubscriptionConfigError,
    SubscriptionConflictError,
    TopicManifestError,
)
from topicmanifest.handlers import (
    Rule,
    bulk_subscribe,
    discover_subscriptions,
    topic,
)
from topicmanifest.subscriptions import (
    BulkSubscribe,
    BulkSubscribeConfig,
    SubscriptionBuilder,
    SubscriptionManifestEntry,
    SubscriptionRegistry,
    SubscriptionRule,
    TopicKey,
    TopicRoutes,
    TopicRule,
    default_registry,
    dumps_manifest,
    encode_manifest,
    loads_manifest,
    manifest_to_wire,
    render_manifest_json,
)
from topicmanifest.web import FASTAPI_AVAILABLE, create_subscription_router

__all__ = [
    "__version__",
    # Declarations
    "topic",
    "Rule",
    "bulk_subscribe",
    "discover_subscriptions",
    # Registry
    "TopicKey",
    "SubscriptionRule",
    "BulkSubscribeConfig",
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
    # Configuration
    "ManifestEndpointConfig",
    "PlaceholderResolver",
    # Web
    "FASTAPI_AVAILABLE",
    "create_subscription_router",
    # Exceptions
    "TopicManifestError",
    "SubscriptionConfigError",
    "SubscriptionConflictError",
    "DefaultRouteConflictError",
    "DeadLetterTopicConflictError",
    "DuplicateRulePriorityError",
    "InvalidBulkSubscribeError",
    "InvalidTopicKeyError",
    "MetadataParseError",
    "PlaceholderResolutionError",
    "ManifestDecodeError",
    "FastAPINotAvailableError",
]
