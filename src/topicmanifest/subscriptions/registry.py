"""
Subscription registry accumulating topic declarations and rendering the manifest.

The registry is the single authority the handler discovery pass writes into
and the subscribe endpoint reads from. It keeps one SubscriptionBuilder per
TopicKey, created lazily on the first declaration for that key.

Thread-Safety:
    Registration may run from several threads during application startup.
    Every mutating and enumerating operation holds one registry-wide lock,
    which also covers the check-then-insert of a new builder.

Example:
    >>> registry = SubscriptionRegistry()
    >>> registry.register("pubsub", "orders", "/orders")
    >>> registry.register("pubsub", "orders", "/orders/premium",
    ...                   match="type=='premium'", priority=1)
    >>> [entry.to_wire() for entry in registry.render_manifest()]
    [{'pubsubname': 'pubsub', 'topic': 'orders', 'routes': {...}}]
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping

from topicmanifest.subscriptions.builder import SubscriptionBuilder
from topicmanifest.subscriptions.models import (
    BulkSubscribeConfig,
    SubscriptionManifestEntry,
    SubscriptionRule,
    TopicKey,
)

logger = logging.getLogger(__name__)


class SubscriptionRegistry:
    """
    Registry mapping TopicKeys to their subscription builders.

    Usually one instance exists per running application, owned by whatever
    wires the application together and handed to both handler discovery and
    the manifest endpoint. A module-level ``default_registry`` is provided for
    the common case; separate instances give isolation in tests.

    Attributes:
        _builders: Builders keyed by TopicKey, in first-registration order
        _lock: Lock guarding ``_builders`` and every builder in it
    """

    def __init__(self) -> None:
        """Initialize an empty subscription registry."""
        self._builders: dict[TopicKey, SubscriptionBuilder] = {}
        self._lock = threading.RLock()

    def register(
        self,
        pubsub_name: str,
        topic_name: str,
        route: str,
        *,
        match: str | None = "",
        priority: int = 0,
        dead_letter_topic: str | None = None,
        metadata: Mapping[str, str] | None = None,
        bulk_subscribe: BulkSubscribeConfig | None = None,
    ) -> TopicKey:
        """
        Record one subscription declaration.

        An empty ``match`` makes ``route`` the topic's default route; a
        non-empty one adds a content rule at ``priority``. Repeating an
        identical declaration is a no-op.

        The call is atomic: if any invariant is violated, the registry is left
        exactly as it was before the call.

        Args:
            pubsub_name: Pub/sub component name
            topic_name: Topic name
            route: Application route events are delivered to
            match: Content match expression, empty for the default route
            priority: Rule priority, lower first; ignored for the default route
            dead_letter_topic: Optional dead letter topic
            metadata: Optional subscription metadata, merged per key
            bulk_subscribe: Optional bulk subscribe settings

        Returns:
            The TopicKey the declaration was recorded under

        Raises:
            InvalidTopicKeyError: If pubsub_name or topic_name is empty
            DefaultRouteConflictError: If a different default route is set
            DeadLetterTopicConflictError: If a different dead letter topic is set
            DuplicateRulePriorityError: If another rule uses ``priority``
            SubscriptionConfigError: If route, match, priority or metadata has
                the wrong type, or text is not UTF-8 encodable
        """
        key = TopicKey(pubsub_name, topic_name)

        with self._lock:
            existing = self._builders.get(key)
            candidate = existing.copy() if existing is not None else SubscriptionBuilder(key)

            if match:
                rule = SubscriptionRule(path=route, match=match, priority=priority)
                if not candidate.has_rule(rule):
                    candidate.add_rule(route, match, priority)
            else:
                candidate.set_default_path(route)

            if dead_letter_topic:
                candidate.set_dead_letter_topic(dead_letter_topic)
            if metadata:
                candidate.set_metadata(metadata)
            if bulk_subscribe is not None:
                candidate.set_bulk_subscribe(bulk_subscribe)

            self._builders[key] = candidate

            if existing is None:
                logger.debug(
                    "Created subscription builder for %s",
                    key,
                    extra={"pubsub_name": pubsub_name, "topic": topic_name},
                )
            logger.debug(
                "Registered subscription %s -> %s",
                key,
                route,
                extra={
                    "pubsub_name": pubsub_name,
                    "topic": topic_name,
                    "route": route,
                    "match": match or None,
                    "priority": priority if match else None,
                    "dead_letter_topic": dead_letter_topic,
                    "bulk_subscribe": bulk_subscribe is not None,
                },
            )
            return key

    def render_manifest(self) -> list[SubscriptionManifestEntry]:
        """
        Build one manifest entry per registered topic.

        Entries are freshly computed on each call and listed in the order the
        topics were first registered.
        """
        with self._lock:
            return [builder.build() for builder in self._builders.values()]

    def contains(self, key: TopicKey) -> bool:
        """Check whether any declaration was recorded for ``key``."""
        with self._lock:
            return key in self._builders

    def keys(self) -> list[TopicKey]:
        """List registered keys in registration order."""
        with self._lock:
            return list(self._builders)

    def clear(self) -> None:
        """
        Remove all registered subscriptions.

        Primarily useful for testing to reset state between tests.
        """
        with self._lock:
            self._builders.clear()
            logger.debug("Subscription registry cleared")

    def __len__(self) -> int:
        """Return the number of registered topics."""
        with self._lock:
            return len(self._builders)

    def __bool__(self) -> bool:
        """Registry is always truthy, even when empty."""
        return True

    def __contains__(self, key: object) -> bool:
        """Support 'in' operator for checking registration."""
        return isinstance(key, TopicKey) and self.contains(key)

    def __iter__(self) -> Iterator[TopicKey]:
        """Iterate over registered keys."""
        with self._lock:
            # Return a copy to avoid issues with concurrent modification
            return iter(list(self._builders))

    def __repr__(self) -> str:
        return f"SubscriptionRegistry(topics={len(self)})"


# Module-level default registry instance
default_registry = SubscriptionRegistry()


__all__ = ["SubscriptionRegistry", "default_registry"]
