"""Canonical keys for configuration sets.

Configuration sets are compared by value and type, regardless of
insertion order. A canonical JSON rendering gives every equal set the
same string, which makes it usable as a dictionary key.

Design goals:
- Deterministic: same set always produces same key
- Type-preserving: ``{"n": 1}`` and ``{"n": "1"}`` produce different keys
"""

from __future__ import annotations

import json
from typing import Any


def canonical_json(data: Any) -> str:
    """
    Stable JSON serialization with sorted keys and no extra whitespace.

    Args:
        data: JSON-serializable data (dict/list/str/int/float/bool/None).

    Returns:
        Canonical JSON string.

    Example:
        >>> canonical_json({"b": 1, "a": "2"})
        '{"a":"2","b":1}'
    """
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def config_key(config: dict[str, int | str]) -> str:
    """
    Compute the lookup key of a configuration set.

    Args:
        config: Mapping of setting name to integer or string value.

    Returns:
        Canonical string equal for exactly the equal configuration sets.

    Example:
        >>> config_key({"Threads": 1, "Ranks": 4}) == config_key({"Ranks": 4, "Threads": 1})
        True
        >>> config_key({"Ranks": 4}) == config_key({"Ranks": "4"})
        False
    """
    return canonical_json(config)
