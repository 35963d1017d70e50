"""Read-only view of a started system.

Started components are stored as nested mappings, so a component named
``foo.bar`` can be reached both as ``components["foo.bar"]`` and as
``components["foo"]["bar"]``. Iteration yields the top-level names only."""

from collections.abc import Mapping
from typing import Any, Iterator

from systemic.paths import get_path, has_path

__all__ = ["ComponentMap"]


class ComponentMap(Mapping):
    """The live components produced by one start of a system.

    Example:
        >>> components = await system.start()
        >>> components["db"]
        >>> components["foo.bar"] is components["foo"]["bar"]
        True
    """

    def __init__(self, components: dict[str, Any]):
        self._components = components

    def __getitem__(self, name: str) -> Any:
        if not has_path(self._components, name):
            raise KeyError(name)
        return get_path(self._components, name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and has_path(self._components, name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._components)

    def __len__(self) -> int:
        return len(self._components)

    def __repr__(self) -> str:
        return f"ComponentMap({self._components!r})"
