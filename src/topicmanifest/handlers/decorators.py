"""
Subscription handler decorators.

This module contains the @topic and @bulk_subscribe decorators for declaring
which pub/sub topics a handler method receives. The decorators only attach
declarations to the function; ``discover_subscriptions`` later reads them and
registers them with a SubscriptionRegistry.

Example:
    >>> from topicmanifest.handlers import Rule, bulk_subscribe, topic
    >>>
    >>> class OrderHandlers:
    ...     @topic("orders", "pubsub", route="/orders")
    ...     def on_order(self, event): ...
    ...
    ...     @topic("orders", "pubsub", route="/orders/premium",
    ...            rule=Rule("event.type == 'premium'", priority=1))
    ...     def on_premium_order(self, event): ...
    ...
    ...     @bulk_subscribe(max_messages_count=100, max_await_duration_ms=500)
    ...     @topic("audit", "pubsub", route="/audit")
    ...     def on_audit_batch(self, batch): ...
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from topicmanifest.subscriptions.models import BulkSubscribeConfig

# Type variable for handler functions - preserves the exact type of the decorated function
F = TypeVar("F", bound=Callable[..., Any])

_TOPICS_ATTR = "_topic_declarations"
_BULK_ATTR = "_bulk_subscribe_config"


@dataclass(frozen=True)
class Rule:
    """
    Content-based routing rule for a @topic declaration.

    Attributes:
        match: Expression the sidecar evaluates against each event
        priority: Evaluation order among rules for the same topic, lower first
    """

    match: str
    priority: int = 0


@dataclass(frozen=True)
class TopicDeclaration:
    """
    One @topic declaration as attached to a handler.

    Names may contain ``${name}`` or ``${name:default}`` placeholders, which
    are expanded at discovery time.

    Attributes:
        name: Topic name
        pubsub_name: Pub/sub component name
        route: Delivery route, defaults to the topic name when None
        rule: Optional content rule; without one the route is the default route
        dead_letter_topic: Optional dead letter topic
        metadata: Mapping or JSON object text of string metadata
    """

    name: str
    pubsub_name: str
    route: str | None = None
    rule: Rule | None = None
    dead_letter_topic: str | None = None
    metadata: Mapping[str, str] | str | None = None


def topic(
    name: str,
    pubsub_name: str,
    *,
    route: str | None = None,
    rule: Rule | None = None,
    dead_letter_topic: str | None = None,
    metadata: Mapping[str, str] | str | None = None,
) -> Callable[[F], F]:
    """
    Decorator to mark a method as the receiver of a pub/sub topic.

    The decorator can be stacked to receive several topics, or several rules
    of the same topic, on one handler. Declarations are kept in the order
    they appear in the source.

    Args:
        name: Topic name, may contain placeholders
        pubsub_name: Pub/sub component name, may contain placeholders
        route: Route the sidecar delivers to; defaults to the topic name
        rule: Optional content rule
        dead_letter_topic: Optional dead letter topic
        metadata: Subscription metadata as a mapping or JSON object text

    Returns:
        A decorator that records the declaration and returns the function unchanged
    """
    declaration = TopicDeclaration(
        name=name,
        pubsub_name=pubsub_name,
        route=route,
        rule=rule,
        dead_letter_topic=dead_letter_topic,
        metadata=metadata,
    )

    def decorator(func: F) -> F:
        existing: tuple[TopicDeclaration, ...] = getattr(func, _TOPICS_ATTR, ())
        # Decorators apply bottom-up; prepend to keep source order
        setattr(func, _TOPICS_ATTR, (declaration, *existing))
        return func

    return decorator


def bulk_subscribe(
    max_messages_count: int | None = None,
    max_await_duration_ms: int | None = None,
) -> Callable[[F], F]:
    """
    Decorator enabling bulk delivery for every @topic on the handler.

    Bounds are validated immediately, so a bad value fails at import time.

    Raises:
        InvalidBulkSubscribeError: If a bound is out of range
    """
    config = BulkSubscribeConfig(
        enabled=True,
        max_messages_count=max_messages_count,
        max_await_duration_ms=max_await_duration_ms,
    )

    def decorator(func: F) -> F:
        setattr(func, _BULK_ATTR, config)
        return func

    return decorator


def get_topic_declarations(func: Callable[..., Any]) -> tuple[TopicDeclaration, ...]:
    """Get the @topic declarations of a function, empty if it has none."""
    declarations = getattr(func, _TOPICS_ATTR, ())
    return declarations if isinstance(declarations, tuple) else ()


def get_bulk_subscribe(func: Callable[..., Any]) -> BulkSubscribeConfig | None:
    """Get the @bulk_subscribe settings of a function, or None."""
    config = getattr(func, _BULK_ATTR, None)
    return config if isinstance(config, BulkSubscribeConfig) else None


def is_topic_handler(func: Callable[..., Any]) -> bool:
    """Check if a function carries at least one @topic declaration."""
    return bool(get_topic_declarations(func))


__all__ = [
    "Rule",
    "TopicDeclaration",
    "topic",
    "bulk_subscribe",
    "get_topic_declarations",
    "get_bulk_subscribe",
    "is_topic_handler",
]
