"""
Shared pytest fixtures for the topicmanifest library tests.

This module provides:
- Topic key fixtures (orders_key)
- Builder and registry fixtures (builder, registry)
- Placeholder resolver fixtures (resolver)

Registries are always fresh instances; the module-level default registry is
cleared around every test so tests never leak subscriptions into each other.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from topicmanifest.config import PlaceholderResolver
from topicmanifest.subscriptions.builder import SubscriptionBuilder
from topicmanifest.subscriptions.models import TopicKey
from topicmanifest.subscriptions.registry import SubscriptionRegistry, default_registry


@pytest.fixture
def orders_key() -> TopicKey:
    """Key for the 'orders' topic on the 'pubsub' component."""
    return TopicKey("pubsub", "orders")


@pytest.fixture
def builder(orders_key: TopicKey) -> SubscriptionBuilder:
    """Empty builder for the orders topic."""
    return SubscriptionBuilder(orders_key)


@pytest.fixture
def registry() -> SubscriptionRegistry:
    """Fresh, isolated subscription registry."""
    return SubscriptionRegistry()


@pytest.fixture
def resolver() -> PlaceholderResolver:
    """Placeholder resolver that ignores the process environment."""
    return PlaceholderResolver({"pubsubName": "messagebus"}, use_environment=False)


@pytest.fixture(autouse=True)
def _reset_default_registry() -> Iterator[None]:
    default_registry.clear()
    yield
    default_registry.clear()
