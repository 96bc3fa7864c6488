"""
Configuration merger for iskill.

Later layers override earlier ones. List-valued keys can be extended or
trimmed instead of replaced with ``+key`` / ``-key``.
"""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge ``override`` onto ``base`` without mutating either.

    Merge rules:
    - Scalar values: override replaces base
    - Dicts: recursive deep merge
    - Lists: override replaces base
    - ``+key`` with a list: append items missing from base
    - ``-key`` with a list: remove those items from base
    - null/None value: drop the key, falling back to the next layer down

    Examples:
        >>> deep_merge({"paths": ["a"]}, {"+paths": ["b"]})
        {"paths": ["a", "b"]}

        >>> deep_merge({"paths": ["a", "b"]}, {"-paths": ["a"]})
        {"paths": ["b"]}
    """
    result = base.copy()

    for key, value in override.items():
        if key.startswith("+") and isinstance(value, list):
            actual_key = key[1:]
            current = result.get(actual_key)
            if isinstance(current, list):
                result[actual_key] = current + [item for item in value if item not in current]
            else:
                result[actual_key] = list(value)

        elif key.startswith("-") and isinstance(value, list):
            actual_key = key[1:]
            current = result.get(actual_key)
            if isinstance(current, list):
                result[actual_key] = [item for item in current if item not in value]

        elif value is None:
            result.pop(key, None)

        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)

        else:
            result[key] = value

    return result


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration layers in order; later layers win."""
    result: dict[str, Any] = {}
    for config in configs:
        if config:
            result = deep_merge(result, config)
    return result
