"""
Value types for topic subscriptions and the manifest served to the sidecar.

Two families live here:

- Declaration types (``TopicKey``, ``SubscriptionRule``, ``BulkSubscribeConfig``)
  are frozen dataclasses validated on construction. They are what handler
  discovery hands to the registry.
- Manifest types (``TopicRule``, ``TopicRoutes``, ``BulkSubscribe``,
  ``SubscriptionManifestEntry``) are frozen Pydantic models whose aliases match
  the wire format the sidecar reads from the subscribe endpoint.

Example:
    >>> key = TopicKey("pubsub", "orders")
    >>> rule = SubscriptionRule(path="/orders/premium", match="type=='premium'", priority=1)
    >>> bulk = BulkSubscribeConfig(max_messages_count=100, max_await_duration_ms=500)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from topicmanifest.exceptions import (
    InvalidBulkSubscribeError,
    InvalidTopicKeyError,
    SubscriptionConfigError,
)


def require_text(field: str, value: Any) -> None:
    """
    Check that a value is a string the manifest can carry.

    Raises:
        SubscriptionConfigError: If the value is not a str, or holds characters
            with no UTF-8 encoding (lone surrogates)
    """
    if not isinstance(value, str):
        raise SubscriptionConfigError(f"{field} must be a string, got {value!r}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SubscriptionConfigError(
            f"{field} must be encodable as UTF-8, got {value!r}: {e.reason}"
        ) from e


def _require_name(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidTopicKeyError(field, value)
    require_text(field, value)


@dataclass(frozen=True)
class TopicKey:
    """
    Identity of a subscription target.

    Two keys with the same pubsub and topic names are interchangeable and hash
    identically, so a key is only ever used to group declarations.

    Attributes:
        pubsub_name: Name of the pub/sub component on the sidecar
        topic_name: Name of the topic within that component
    """

    pubsub_name: str
    topic_name: str

    def __post_init__(self) -> None:
        _require_name("pubsub_name", self.pubsub_name)
        _require_name("topic_name", self.topic_name)

    def __str__(self) -> str:
        return f"{self.pubsub_name}/{self.topic_name}"


@dataclass(frozen=True)
class SubscriptionRule:
    """
    One content-based routing rule.

    Attributes:
        path: Application route events matching ``match`` are delivered to
        match: Expression evaluated by the sidecar against each event
        priority: Lower values are evaluated first
    """

    path: str
    match: str
    priority: int

    def __post_init__(self) -> None:
        require_text("path", self.path)
        require_text("match", self.match)
        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise SubscriptionConfigError(
                f"priority must be an integer, got {self.priority!r}"
            )


@dataclass(frozen=True)
class BulkSubscribeConfig:
    """
    Bulk subscribe settings for a topic.

    ``None`` bounds leave the choice to the sidecar.

    Attributes:
        enabled: Whether messages are delivered in batches
        max_messages_count: Largest batch size, at least 1 when set
        max_await_duration_ms: Longest wait before a partial batch is delivered,
            at least 0 when set

    Example:
        >>> BulkSubscribeConfig(max_messages_count=1, max_await_duration_ms=0)
        >>> BulkSubscribeConfig(max_messages_count=0)  # raises InvalidBulkSubscribeError
    """

    enabled: bool = True
    max_messages_count: int | None = None
    max_await_duration_ms: int | None = None

    def __post_init__(self) -> None:
        """Validate bounds."""
        count = self.max_messages_count
        if count is not None:
            if isinstance(count, bool) or not isinstance(count, int):
                raise InvalidBulkSubscribeError(
                    "max_messages_count", count, "must be an integer"
                )
            if count < 1:
                raise InvalidBulkSubscribeError("max_messages_count", count, "must be >= 1")

        duration = self.max_await_duration_ms
        if duration is not None:
            if isinstance(duration, bool) or not isinstance(duration, int):
                raise InvalidBulkSubscribeError(
                    "max_await_duration_ms", duration, "must be an integer"
                )
            if duration < 0:
                raise InvalidBulkSubscribeError(
                    "max_await_duration_ms", duration, "must be >= 0"
                )


class TopicRule(BaseModel):
    """A routing rule as it appears in the manifest. Priority is implied by position."""

    model_config = ConfigDict(frozen=True)

    match: str
    path: str


class TopicRoutes(BaseModel):
    """Routing table: rules in evaluation order plus the fallback route."""

    model_config = ConfigDict(frozen=True)

    rules: tuple[TopicRule, ...] = ()
    default: str | None = None


class BulkSubscribe(BaseModel):
    """Bulk subscribe settings as they appear in the manifest."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    enabled: bool = True
    max_messages_count: int | None = Field(default=None, alias="maxMessagesCount", ge=1)
    max_await_duration_ms: int | None = Field(default=None, alias="maxAwaitDurationMs", ge=0)

    @classmethod
    def from_config(cls, config: BulkSubscribeConfig) -> BulkSubscribe:
        return cls(
            enabled=config.enabled,
            max_messages_count=config.max_messages_count,
            max_await_duration_ms=config.max_await_duration_ms,
        )


class SubscriptionManifestEntry(BaseModel):
    """
    One topic subscription as served to the sidecar.

    Produced by ``SubscriptionBuilder.build()``. Exactly one of ``route`` and
    ``routes`` is set: a flat ``route`` when the topic has no content rules, a
    ``routes`` table otherwise.

    Attributes:
        pubsub_name: Pub/sub component name (wire: ``pubsubname``)
        topic: Topic name
        route: Flat delivery route, only without content rules
        routes: Routing table, only with content rules
        dead_letter_topic: Topic for undeliverable messages (wire: ``deadLetterTopic``)
        metadata: Subscription metadata, omitted from the wire when empty
        bulk_subscribe: Bulk subscribe settings (wire: ``bulkSubscribe``)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pubsub_name: str = Field(alias="pubsubname")
    topic: str
    route: str | None = None
    routes: TopicRoutes | None = None
    dead_letter_topic: str | None = Field(default=None, alias="deadLetterTopic")
    metadata: dict[str, str] = Field(default_factory=dict)
    bulk_subscribe: BulkSubscribe | None = Field(default=None, alias="bulkSubscribe")

    @model_validator(mode="after")
    def check_single_route_shape(self) -> SubscriptionManifestEntry:
        if self.route is not None and self.routes is not None:
            raise ValueError("route and routes are mutually exclusive")
        return self

    @property
    def key(self) -> TopicKey:
        return TopicKey(self.pubsub_name, self.topic)

    def to_wire(self) -> dict[str, Any]:
        """
        Convert to the JSON-ready mapping the sidecar expects.

        Unset optional fields are omitted, as is empty metadata.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        if not self.metadata:
            data.pop("metadata", None)
        return data

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> SubscriptionManifestEntry:
        """Parse one manifest object. Raises pydantic.ValidationError on bad shape."""
        return cls.model_validate(data)


__all__ = [
    "require_text",
    "TopicKey",
    "SubscriptionRule",
    "BulkSubscribeConfig",
    "TopicRule",
    "TopicRoutes",
    "BulkSubscribe",
    "SubscriptionManifestEntry",
]
