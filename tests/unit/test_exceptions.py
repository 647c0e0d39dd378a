"""Unit tests for the topicmanifest exception hierarchy."""

import pytest

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
from topicmanifest.subscriptions.models import SubscriptionRule, TopicKey

KEY = TopicKey("pubsub", "orders")


class TestHierarchy:
    """All library errors share one base; configuration errors are ValueErrors."""

    @pytest.mark.parametrize(
        "error",
        [
            DefaultRouteConflictError(KEY, "/a", "/b"),
            DeadLetterTopicConflictError(KEY, "a", "b"),
            DuplicateRulePriorityError(
                KEY, 1, SubscriptionRule("/a", "a", 1), SubscriptionRule("/b", "b", 1)
            ),
        ],
    )
    def test_conflicts(self, error: SubscriptionConflictError) -> None:
        assert isinstance(error, SubscriptionConflictError)
        assert isinstance(error, SubscriptionConfigError)
        assert isinstance(error, ValueError)
        assert isinstance(error, TopicManifestError)
        assert error.key == KEY

    @pytest.mark.parametrize(
        "error",
        [
            InvalidBulkSubscribeError("max_messages_count", 0, "must be >= 1"),
            InvalidTopicKeyError("topic_name", ""),
            MetadataParseError("H.on", "{", "bad"),
            PlaceholderResolutionError("${x}"),
        ],
    )
    def test_config_errors(self, error: SubscriptionConfigError) -> None:
        assert isinstance(error, SubscriptionConfigError)
        assert isinstance(error, ValueError)

    def test_decode_error_is_not_config_error(self) -> None:
        assert not issubclass(ManifestDecodeError, SubscriptionConfigError)
        assert issubclass(ManifestDecodeError, TopicManifestError)

    def test_fastapi_error_is_import_error(self) -> None:
        error = FastAPINotAvailableError()

        assert isinstance(error, ImportError)
        assert "pip install" in str(error)


class TestMessages:
    """Messages name the topic, pubsub and both values."""

    def test_default_route_message(self) -> None:
        message = str(DefaultRouteConflictError(KEY, "/a", "/b"))

        assert "'orders'" in message
        assert "'pubsub'" in message
        assert "current: '/a'" in message
        assert "supplied: '/b'" in message

    def test_dead_letter_message(self) -> None:
        message = str(DeadLetterTopicConflictError(KEY, "one", "two"))

        assert "current: 'one'" in message
        assert "supplied: 'two'" in message

    def test_priority_message(self) -> None:
        message = str(
            DuplicateRulePriorityError(
                KEY, 4, SubscriptionRule("/a", "x", 4), SubscriptionRule("/b", "y", 4)
            )
        )

        assert "priority of 4" in message
        assert "'/a'" in message
        assert "'/b'" in message

    def test_bulk_message(self) -> None:
        message = str(InvalidBulkSubscribeError("max_messages_count", 0, "must be >= 1"))

        assert "max_messages_count=0" in message
