"""Library exceptions for the topicmanifest package.

Every error raised while registering subscriptions is a static configuration
defect. Nothing here is retried: errors propagate to whatever bootstrapped
handler discovery so that application startup fails with a message naming the
conflicting declarations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from topicmanifest.subscriptions.models import SubscriptionRule, TopicKey


class TopicManifestError(Exception):
    """Base exception for topicmanifest library."""

    pass


class SubscriptionConfigError(TopicManifestError, ValueError):
    """Raised when a subscription declaration is invalid."""

    pass


class SubscriptionConflictError(SubscriptionConfigError):
    """Raised when two declarations for the same topic disagree."""

    def __init__(self, key: TopicKey, message: str) -> None:
        self.key = key
        super().__init__(message)


class DefaultRouteConflictError(SubscriptionConflictError):
    """Raised when a second, different default route is set for a topic."""

    def __init__(self, key: TopicKey, current: str, supplied: str) -> None:
        self.current = current
        self.supplied = supplied
        super().__init__(
            key,
            f"A default route is already set for topic '{key.topic_name}' "
            f"on pubsub '{key.pubsub_name}' "
            f"(current: '{current}', supplied: '{supplied}')",
        )


class DeadLetterTopicConflictError(SubscriptionConflictError):
    """Raised when a second, different dead letter topic is set for a topic."""

    def __init__(self, key: TopicKey, current: str, supplied: str) -> None:
        self.current = current
        self.supplied = supplied
        super().__init__(
            key,
            f"A dead letter topic is already set for topic '{key.topic_name}' "
            f"on pubsub '{key.pubsub_name}' "
            f"(current: '{current}', supplied: '{supplied}')",
        )


class DuplicateRulePriorityError(SubscriptionConflictError):
    """
    Raised when two routing rules for the same topic share a priority.

    Attributes:
        key: The topic the rules were declared for
        priority: The priority value used twice
        existing_rule: The rule that already holds the priority
        supplied_rule: The rule that was rejected
    """

    def __init__(
        self,
        key: TopicKey,
        priority: int,
        existing_rule: SubscriptionRule,
        supplied_rule: SubscriptionRule,
    ) -> None:
        self.priority = priority
        self.existing_rule = existing_rule
        self.supplied_rule = supplied_rule
        super().__init__(
            key,
            f"A rule priority of {priority} is already used for topic "
            f"'{key.topic_name}' on pubsub '{key.pubsub_name}' "
            f"(existing: match '{existing_rule.match}' -> '{existing_rule.path}', "
            f"supplied: match '{supplied_rule.match}' -> '{supplied_rule.path}')",
        )


class InvalidBulkSubscribeError(SubscriptionConfigError):
    """Raised when bulk subscribe bounds are out of range."""

    def __init__(self, field: str, value: Any, constraint: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid bulk subscribe setting {field}={value!r}: {constraint}")


class InvalidTopicKeyError(SubscriptionConfigError):
    """Raised when a pubsub name or topic name is missing or blank."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} must be a non-empty string, got {value!r}")


class MetadataParseError(SubscriptionConfigError):
    """Raised when topic metadata declared on a handler cannot be parsed."""

    def __init__(self, handler_name: str, raw: Any, reason: str) -> None:
        self.handler_name = handler_name
        self.raw = raw
        super().__init__(f"Error while parsing metadata for handler '{handler_name}': {reason}")


class PlaceholderResolutionError(SubscriptionConfigError):
    """Raised in strict mode when a placeholder has no value and no default."""

    def __init__(self, placeholder: str) -> None:
        self.placeholder = placeholder
        super().__init__(
            f"Could not resolve placeholder '{placeholder}'. "
            "Provide a value or use the '${name:default}' form."
        )


class ManifestDecodeError(TopicManifestError):
    """Raised when a serialized manifest cannot be parsed back."""

    pass


class FastAPINotAvailableError(TopicManifestError, ImportError):
    """Raised when the manifest endpoint is requested without FastAPI installed."""

    def __init__(self) -> None:
        super().__init__(
            "FastAPI is not installed. Install it with: pip install topicmanifest-py[fastapi]"
        )


__all__ = [
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
