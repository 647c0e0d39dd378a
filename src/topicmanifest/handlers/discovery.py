"""
Discovery of @topic handlers and their registration.

discover_subscriptions scans an object (or class) for methods carrying @topic
declarations, expands placeholders in their names, and feeds each declaration
to a SubscriptionRegistry. Any configuration conflict raised by the registry
propagates unchanged so that startup fails.

Example:
    >>> registry = SubscriptionRegistry()
    >>> discover_subscriptions(OrderHandlers(), registry)
    [TopicKey(pubsub_name='pubsub', topic_name='orders'), ...]
"""

import logging
from collections.abc import Mapping
from typing import Any

from topicmanifest.config import PlaceholderResolver
from topicmanifest.exceptions import MetadataParseError
from topicmanifest.handlers.decorators import (
    TopicDeclaration,
    get_bulk_subscribe,
    get_topic_declarations,
)
from topicmanifest.serialization import json_loads
from topicmanifest.subscriptions.models import BulkSubscribeConfig, TopicKey
from topicmanifest.subscriptions.registry import SubscriptionRegistry, default_registry

logger = logging.getLogger(__name__)


def parse_metadata(raw: Mapping[str, str] | str | None, handler_name: str) -> dict[str, str]:
    """
    Normalize declared metadata to a str -> str dict.

    Accepts a mapping, JSON object text, or None / empty text for no metadata.

    Raises:
        MetadataParseError: If the text is not a JSON object or any key or
            value is not a string
    """
    if raw is None:
        return {}

    if isinstance(raw, str):
        if not raw.strip():
            return {}
        try:
            parsed: Any = json_loads(raw)
        except ValueError as e:
            raise MetadataParseError(handler_name, raw, str(e)) from e
    else:
        parsed = raw

    if not isinstance(parsed, Mapping):
        raise MetadataParseError(
            handler_name, raw, f"expected a JSON object, got {type(parsed).__name__}"
        )

    metadata: dict[str, str] = {}
    for key, value in parsed.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise MetadataParseError(
                handler_name, raw, f"keys and values must be strings, got {key!r}: {value!r}"
            )
        metadata[key] = value
    return metadata


def discover_subscriptions(
    owner: Any,
    registry: SubscriptionRegistry | None = None,
    *,
    resolver: PlaceholderResolver | None = None,
) -> list[TopicKey]:
    """
    Register every @topic declaration found on ``owner``.

    Both private and public methods are scanned, including inherited ones.
    Declarations whose topic or pubsub name resolves to an empty string are
    skipped. A declaration without an explicit route is delivered to the
    topic name.

    Args:
        owner: Object or class containing @topic decorated methods
        registry: Registry to write into; defaults to the module-level registry
        resolver: Placeholder resolver; defaults to one backed by the environment

    Returns:
        The keys registered, one per declaration, in discovery order

    Raises:
        SubscriptionConfigError: For conflicting or malformed declarations
    """
    target = registry if registry is not None else default_registry
    resolver = resolver or PlaceholderResolver()
    owner_name = owner.__name__ if isinstance(owner, type) else owner.__class__.__name__
    keys: list[TopicKey] = []

    for attr_name in dir(owner):
        # Skip dunder methods
        if attr_name.startswith("__"):
            continue

        attr = getattr(owner, attr_name, None)
        if attr is None:
            continue

        declarations = get_topic_declarations(attr)
        if not declarations:
            continue

        bulk = get_bulk_subscribe(attr)
        handler_name = f"{owner_name}.{attr_name}"
        for declaration in declarations:
            key = _register_declaration(target, resolver, declaration, bulk, handler_name)
            if key is not None:
                keys.append(key)

    logger.info(
        "Discovered %d subscription declaration(s) on %s",
        len(keys),
        owner_name,
        extra={"owner": owner_name, "declarations": len(keys)},
    )
    return keys


def _register_declaration(
    registry: SubscriptionRegistry,
    resolver: PlaceholderResolver,
    declaration: TopicDeclaration,
    bulk: BulkSubscribeConfig | None,
    handler_name: str,
) -> TopicKey | None:
    topic_name = resolver.resolve(declaration.name)
    pubsub_name = resolver.resolve(declaration.pubsub_name)
    if not topic_name or not pubsub_name:
        logger.debug(
            "Skipping subscription on %s: empty topic or pubsub name",
            handler_name,
            extra={"handler": handler_name, "topic": topic_name, "pubsub_name": pubsub_name},
        )
        return None

    route = declaration.route or topic_name
    dead_letter_topic = (
        resolver.resolve(declaration.dead_letter_topic) if declaration.dead_letter_topic else None
    )
    rule = declaration.rule

    key = registry.register(
        pubsub_name,
        topic_name,
        route,
        match=rule.match if rule else "",
        priority=rule.priority if rule else 0,
        dead_letter_topic=dead_letter_topic,
        metadata=parse_metadata(declaration.metadata, handler_name),
        bulk_subscribe=bulk,
    )
    logger.debug(
        "Registered handler %s for %s",
        handler_name,
        key,
        extra={"handler": handler_name, "pubsub_name": pubsub_name, "topic": topic_name},
    )
    return key


__all__ = [
    "discover_subscriptions",
    "parse_metadata",
]
