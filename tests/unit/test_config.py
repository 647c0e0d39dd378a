"""Unit tests for topicmanifest configuration."""

import pytest

from topicmanifest.config import (
    DEFAULT_SUBSCRIBE_PATH,
    ManifestEndpointConfig,
    PlaceholderResolver,
)
from topicmanifest.exceptions import PlaceholderResolutionError


class TestPlaceholderResolver:
    """Tests for PlaceholderResolver."""

    def test_plain_text_unchanged(self) -> None:
        resolver = PlaceholderResolver(use_environment=False)

        assert resolver.resolve("orders") == "orders"

    def test_explicit_value(self) -> None:
        resolver = PlaceholderResolver({"bus": "kafka"}, use_environment=False)

        assert resolver.resolve("${bus}") == "kafka"

    def test_default_used_when_missing(self) -> None:
        resolver = PlaceholderResolver(use_environment=False)

        assert resolver.resolve("${pubsubName:pubsub}") == "pubsub"

    def test_value_beats_default(self) -> None:
        resolver = PlaceholderResolver({"pubsubName": "redis"}, use_environment=False)

        assert resolver.resolve("${pubsubName:pubsub}") == "redis"

    def test_embedded_and_multiple(self) -> None:
        resolver = PlaceholderResolver({"env": "prod"}, use_environment=False)

        assert resolver.resolve("orders-${env}-${region:eu}") == "orders-prod-eu"

    def test_unresolved_left_as_is(self) -> None:
        resolver = PlaceholderResolver(use_environment=False)

        assert resolver.resolve("${missing}") == "${missing}"

    def test_strict_mode_raises(self) -> None:
        resolver = PlaceholderResolver(use_environment=False, strict=True)

        with pytest.raises(PlaceholderResolutionError) as exc_info:
            resolver.resolve("${missing}")

        assert exc_info.value.placeholder == "${missing}"
        assert resolver.strict is True

    def test_strict_mode_accepts_defaults(self) -> None:
        resolver = PlaceholderResolver(use_environment=False, strict=True)

        assert resolver.resolve("${missing:fallback}") == "fallback"

    def test_environment_lookup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PUBSUB_NAME", "from-env")

        assert PlaceholderResolver().resolve("${PUBSUB_NAME}") == "from-env"

    def test_explicit_values_beat_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PUBSUB_NAME", "from-env")
        resolver = PlaceholderResolver({"PUBSUB_NAME": "explicit"})

        assert resolver.resolve("${PUBSUB_NAME}") == "explicit"

    def test_environment_ignored_when_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PUBSUB_NAME", "from-env")
        resolver = PlaceholderResolver(use_environment=False)

        assert resolver.lookup("PUBSUB_NAME") is None


class TestManifestEndpointConfig:
    """Tests for ManifestEndpointConfig."""

    def test_defaults(self) -> None:
        config = ManifestEndpointConfig()

        assert config.path == DEFAULT_SUBSCRIBE_PATH == "/dapr/subscribe"
        assert config.media_type == "application/json"

    def test_rejects_relative_path(self) -> None:
        with pytest.raises(ValueError, match="must start with '/'"):
            ManifestEndpointConfig(path="dapr/subscribe")

    def test_rejects_empty_media_type(self) -> None:
        with pytest.raises(ValueError, match="media_type"):
            ManifestEndpointConfig(media_type="")
