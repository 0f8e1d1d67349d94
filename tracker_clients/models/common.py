"""Helpers shared by the record models.

Records mirror vendor JSON. Each model has a ``from_dict`` that tolerates
missing keys and ``null`` values and keeps the source object in ``raw``.
"""

from typing import Any, Callable, Dict, List, Optional, TypeVar


T = TypeVar("T")


def text(data: Dict[str, Any], key: str) -> str:
    """Return ``data[key]`` as a string, ``""`` when missing or null."""
    value = data.get(key)
    if value is None:
        return ""
    return str(value)


def integer(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def boolean(data: Dict[str, Any], key: str) -> bool:
    return bool(data.get(key) or False)


def optional(factory: Callable[[Dict[str, Any]], T], data: Any) -> Optional[T]:
    """Build a nested record, or None when the JSON value is not an object."""
    if isinstance(data, dict):
        return factory(data)
    return None


def many(factory: Callable[[Dict[str, Any]], T], data: Any) -> List[T]:
    """Build a list of nested records, skipping anything that isn't an object."""
    if not isinstance(data, list):
        return []
    return [factory(item) for item in data if isinstance(item, dict)]


def strings(data: Any) -> List[str]:
    if not isinstance(data, list):
        return []
    return [str(item) for item in data if item is not None]
