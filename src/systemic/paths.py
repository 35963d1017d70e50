"""Dotted-path access into nested component values.

Component names and dependency sources may contain ``.`` to address values
nested inside mappings (or, failing that, object attributes). A key that is
present verbatim always wins over its dotted interpretation.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

__all__ = ["has_path", "get_path", "set_path"]

SEPARATOR = "."

_MISSING = object()


def _lookup(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key, _MISSING)
    if obj is None:
        return _MISSING
    return getattr(obj, key, _MISSING)


def _resolve(obj: Any, path: str) -> Any:
    value = _lookup(obj, path)
    if value is not _MISSING or SEPARATOR not in path:
        return value
    head, rest = path.split(SEPARATOR, 1)
    child = _lookup(obj, head)
    if child is _MISSING:
        return _MISSING
    return _resolve(child, rest)


def has_path(obj: Any, path: str) -> bool:
    return _resolve(obj, path) is not _MISSING


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """Return the value at ``path`` inside ``obj``, or ``default`` if absent.

    Example:
        >>> get_path({"foo": {"bar": 1}}, "foo.bar")
        1
    """
    value = _resolve(obj, path)
    return default if value is _MISSING else value


def set_path(obj: MutableMapping, path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate dicts as needed.

    An intermediate that is not a mapping has the remainder of the path set
    as an attribute on it.
    """
    if SEPARATOR not in path:
        obj[path] = value
        return
    head, rest = path.split(SEPARATOR, 1)
    child = obj.get(head)
    if child is None:
        child = obj[head] = {}
    if isinstance(child, MutableMapping):
        set_path(child, rest, value)
    else:
        _set_attribute_path(child, rest, value)


def _set_attribute_path(obj: Any, path: str, value: Any) -> None:
    head, _, rest = path.partition(SEPARATOR)
    if not rest:
        setattr(obj, head, value)
        return
    child = getattr(obj, head, None)
    if child is None:
        child = {}
        setattr(obj, head, child)
    if isinstance(child, MutableMapping):
        set_path(child, rest, value)
    else:
        _set_attribute_path(child, rest, value)
