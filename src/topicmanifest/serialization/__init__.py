"""
Serialization utilities for topicmanifest.

Example:
    >>> from topicmanifest.serialization import json_dumps
    >>> json_dumps({"topic": "orders"})
    '{"topic":"orders"}'
"""

from topicmanifest.serialization.json import (
    SEPARATORS,
    ManifestJSONEncoder,
    json_dumps,
    json_loads,
)

__all__ = [
    "ManifestJSONEncoder",
    "SEPARATORS",
    "json_dumps",
    "json_loads",
]
