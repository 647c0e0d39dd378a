"""
Handler declarations for topic subscriptions.

This module provides:
- topic: Decorator declaring that a method receives a pub/sub topic
- Rule: Content-based routing rule for a @topic declaration
- bulk_subscribe: Decorator enabling bulk delivery on a handler
- discover_subscriptions: Scan an object and register its declarations

Example:
    >>> from topicmanifest.handlers import Rule, discover_subscriptions, topic
    >>>
    >>> class Handlers:
    ...     @topic("orders", "pubsub", route="/orders")
    ...     def on_order(self, event): ...
    >>>
    >>> discover_subscriptions(Handlers(), registry)
"""

from topicmanifest.handlers.decorators import (
    Rule,
    TopicDeclaration,
    bulk_subscribe,
    get_bulk_subscribe,
    get_topic_declarations,
    is_topic_handler,
    topic,
)
from topicmanifest.handlers.discovery import discover_subscriptions, parse_metadata

__all__ = [
    "Rule",
    "TopicDeclaration",
    "bulk_subscribe",
    "discover_subscriptions",
    "get_bulk_subscribe",
    "get_topic_declarations",
    "is_topic_handler",
    "parse_metadata",
    "topic",
]
