"""
JSON serialization utilities for manifest types.

The sidecar compares nothing byte-for-byte, but stable output keeps responses
cacheable and tests simple, so everything goes through one encoder with fixed
separators.

Example:
    >>> from topicmanifest.serialization import json_dumps, json_loads
    >>>
    >>> json_dumps({"topic": "orders", "rules": ("a", "b")})
    '{"topic":"orders","rules":["a","b"]}'
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

# Compact form, no whitespace
SEPARATORS = (",", ":")


class ManifestJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that understands Pydantic models and read-only mappings.

    - Pydantic models: dumped in JSON mode using their wire aliases, without
      unset (``None``) fields
    - Other mappings: converted to plain dicts

    Example:
        >>> import json
        >>> json.dumps(entry, cls=ManifestJSONEncoder)
    """

    def default(self, obj: Any) -> Any:
        """
        Convert non-serializable objects to JSON-serializable formats.

        Raises:
            TypeError: If object type is not supported
        """
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json", by_alias=True, exclude_none=True)
        if isinstance(obj, Mapping):
            return dict(obj)
        return super().default(obj)


def json_dumps(obj: Any) -> str:
    """
    Serialize object to a compact JSON string.

    Args:
        obj: Object to serialize

    Returns:
        JSON string representation
    """
    return json.dumps(obj, cls=ManifestJSONEncoder, separators=SEPARATORS, ensure_ascii=False)


def json_loads(s: str | bytes) -> Any:
    """Deserialize a JSON string or UTF-8 bytes to a Python object."""
    return json.loads(s)


__all__ = [
    "ManifestJSONEncoder",
    "SEPARATORS",
    "json_dumps",
    "json_loads",
]
