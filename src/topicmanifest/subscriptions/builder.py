"""
Per-topic accumulator for subscription declarations.

A SubscriptionBuilder owns every rule and setting declared for one TopicKey
and enforces the per-topic invariants:

- at most one distinct default route
- at most one distinct dead letter topic
- no two rules sharing a priority

The builder is not thread-safe. SubscriptionRegistry serializes all access.

Example:
    >>> builder = SubscriptionBuilder(TopicKey("pubsub", "orders"))
    >>> builder.set_default_path("/orders").add_rule("/orders/vip", "type=='vip'", 1)
    >>> entry = builder.build()
    >>> entry.routes.default
    '/orders'
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from topicmanifest.exceptions import (
    DeadLetterTopicConflictError,
    DefaultRouteConflictError,
    DuplicateRulePriorityError,
    SubscriptionConfigError,
)
from topicmanifest.subscriptions.models import (
    BulkSubscribe,
    BulkSubscribeConfig,
    SubscriptionManifestEntry,
    SubscriptionRule,
    TopicKey,
    TopicRoutes,
    TopicRule,
    require_text,
)

logger = logging.getLogger(__name__)


class SubscriptionBuilder:
    """
    Mutable accumulator producing an immutable SubscriptionManifestEntry.

    The builder starts flat (no rules) and becomes routed on its first
    ``add_rule`` call. Rules are never removed, so it never goes back.
    Mutators return the builder for chaining.
    """

    def __init__(self, key: TopicKey) -> None:
        self._key = key
        self._rules: list[SubscriptionRule] = []
        self._default_path: str | None = None
        self._dead_letter_topic: str | None = None
        self._metadata: dict[str, str] = {}
        self._bulk_subscribe: BulkSubscribeConfig | None = None

    def add_rule(self, path: str, match: str, priority: int) -> SubscriptionBuilder:
        """
        Add a content-based routing rule.

        Args:
            path: Route for events matching the expression
            match: Expression evaluated by the sidecar
            priority: Evaluation order, lower first; unique per topic

        Raises:
            SubscriptionConfigError: If ``path`` or ``match`` is not a UTF-8
                encodable string, or ``priority`` is not an int
            DuplicateRulePriorityError: If another rule already uses ``priority``
        """
        supplied = SubscriptionRule(path=path, match=match, priority=priority)
        for existing in self._rules:
            if existing.priority == priority:
                raise DuplicateRulePriorityError(self._key, priority, existing, supplied)

        self._rules.append(supplied)
        logger.debug(
            "Added rule for %s: priority %d -> %s",
            self._key,
            priority,
            path,
            extra={
                "pubsub_name": self._key.pubsub_name,
                "topic": self._key.topic_name,
                "priority": priority,
                "path": path,
            },
        )
        return self

    def set_default_path(self, path: str) -> SubscriptionBuilder:
        """
        Set the route used when no rule matches, or the flat route without rules.

        Raises:
            SubscriptionConfigError: If ``path`` is not a UTF-8 encodable string
            DefaultRouteConflictError: If a different default route is already set
        """
        require_text("path", path)
        if self._default_path is not None and self._default_path != path:
            raise DefaultRouteConflictError(self._key, self._default_path, path)
        self._default_path = path
        return self

    def set_dead_letter_topic(self, dead_letter_topic: str) -> SubscriptionBuilder:
        """
        Set the dead letter topic.

        Raises:
            SubscriptionConfigError: If ``dead_letter_topic`` is not a UTF-8 encodable string
            DeadLetterTopicConflictError: If a different dead letter topic is already set
        """
        require_text("dead_letter_topic", dead_letter_topic)
        if self._dead_letter_topic is not None and self._dead_letter_topic != dead_letter_topic:
            raise DeadLetterTopicConflictError(
                self._key, self._dead_letter_topic, dead_letter_topic
            )
        self._dead_letter_topic = dead_letter_topic
        return self

    def set_metadata(self, metadata: Mapping[str, str]) -> SubscriptionBuilder:
        """
        Merge metadata into the topic's metadata. Later values win per key.

        Raises:
            SubscriptionConfigError: If a key or value is not a UTF-8 encodable string
        """
        if not isinstance(metadata, Mapping):
            raise SubscriptionConfigError(f"metadata must be a mapping, got {metadata!r}")
        for name, value in metadata.items():
            if not isinstance(name, str) or not isinstance(value, str):
                raise SubscriptionConfigError(
                    f"Metadata for topic '{self._key.topic_name}' on pubsub "
                    f"'{self._key.pubsub_name}' must map strings to strings, "
                    f"got {name!r}: {value!r}"
                )
            require_text("metadata key", name)
            require_text(f"metadata value for {name!r}", value)
        self._metadata.update(metadata)
        return self

    def set_bulk_subscribe(self, bulk_subscribe: BulkSubscribeConfig) -> SubscriptionBuilder:
        """
        Replace the bulk subscribe settings.

        Raises:
            SubscriptionConfigError: If ``bulk_subscribe`` is not a BulkSubscribeConfig
        """
        if not isinstance(bulk_subscribe, BulkSubscribeConfig):
            raise SubscriptionConfigError(
                f"bulk_subscribe must be a BulkSubscribeConfig, got {bulk_subscribe!r}"
            )
        self._bulk_subscribe = bulk_subscribe
        return self

    def build(self) -> SubscriptionManifestEntry:
        """
        Project the accumulated declarations into a manifest entry.

        With no rules the entry carries a flat ``route`` equal to the default
        path. Otherwise it carries a routing table whose rules are sorted by
        ascending priority and whose default is the default path, if any.
        Metadata keys are emitted in sorted order so rendering is byte-stable.
        """
        route: str | None = None
        routes: TopicRoutes | None = None

        if self._rules:
            ordered = sorted(self._rules, key=lambda rule: rule.priority)
            routes = TopicRoutes(
                rules=tuple(TopicRule(match=rule.match, path=rule.path) for rule in ordered),
                default=self._default_path,
            )
        else:
            route = self._default_path

        bulk = BulkSubscribe.from_config(self._bulk_subscribe) if self._bulk_subscribe else None

        return SubscriptionManifestEntry(
            pubsub_name=self._key.pubsub_name,
            topic=self._key.topic_name,
            route=route,
            routes=routes,
            dead_letter_topic=self._dead_letter_topic,
            metadata={k: self._metadata[k] for k in sorted(self._metadata)},
            bulk_subscribe=bulk,
        )

    def copy(self) -> SubscriptionBuilder:
        """Return an independent builder with the same accumulated state."""
        clone = SubscriptionBuilder(self._key)
        clone._rules = list(self._rules)
        clone._default_path = self._default_path
        clone._dead_letter_topic = self._dead_letter_topic
        clone._metadata = dict(self._metadata)
        clone._bulk_subscribe = self._bulk_subscribe
        return clone

    def has_rule(self, rule: SubscriptionRule) -> bool:
        """Check whether an identical rule (same path, match and priority) exists."""
        return rule in self._rules

    @property
    def key(self) -> TopicKey:
        return self._key

    @property
    def rules(self) -> tuple[SubscriptionRule, ...]:
        """Rules in insertion order."""
        return tuple(self._rules)

    @property
    def default_path(self) -> str | None:
        return self._default_path

    @property
    def dead_letter_topic(self) -> str | None:
        return self._dead_letter_topic

    @property
    def metadata(self) -> dict[str, str]:
        return dict(self._metadata)

    @property
    def bulk_subscribe(self) -> BulkSubscribeConfig | None:
        return self._bulk_subscribe

    @property
    def is_routed(self) -> bool:
        """True once at least one content rule has been added."""
        return bool(self._rules)

    def __repr__(self) -> str:
        return (
            f"SubscriptionBuilder({self._key}, rules={len(self._rules)}, "
            f"default_path={self._default_path!r})"
        )


__all__ = ["SubscriptionBuilder"]
