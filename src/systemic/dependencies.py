"""Normalisation of dependency declarations into :class:`Dependency` records."""

from collections.abc import Mapping
from typing import Any, Iterable

from systemic.domain import NO_SOURCE, Dependency
from systemic.errors import DuplicateDependencyError, InvalidDependencyError

__all__ = ["normalize_dependency", "append_dependencies"]


def normalize_dependency(raw: Any, consumer: str, inject: bool = True) -> Dependency:
    """Turn a dependency declaration into a canonical :class:`Dependency`.

    A declaration is either a component name, a mapping with a ``component``
    key and optional ``destination`` and ``source`` keys, or a ready-made
    :class:`Dependency`. The destination defaults to the component name.

    Args:
        raw: The declaration as written by the caller.
        consumer: Name of the component declaring the dependency, for errors.
        inject: False for ordering-only declarations.

    Returns:
        The normalised dependency record.

    Raises:
        InvalidDependencyError: If ``raw`` does not name a component.

    Example:
        >>> normalize_dependency({"component": "bar", "destination": "baz"}, "foo")
        Dependency(component='bar', destination='baz', source=NO_SOURCE, inject=True)
    """
    if isinstance(raw, Dependency):
        if not raw.component:
            raise InvalidDependencyError(consumer, raw)
        return Dependency(raw.component, raw.destination or raw.component, raw.source, inject)

    if isinstance(raw, str):
        if not raw:
            raise InvalidDependencyError(consumer, raw)
        return Dependency(raw, raw, NO_SOURCE, inject)

    if isinstance(raw, Mapping):
        component = raw.get("component")
        if not isinstance(component, str) or not component:
            raise InvalidDependencyError(consumer, raw)
        destination = raw.get("destination") or component
        if not isinstance(destination, str):
            raise InvalidDependencyError(consumer, raw)
        source = raw["source"] if "source" in raw else NO_SOURCE
        if source is None:
            source = ""
        elif source is not NO_SOURCE and not isinstance(source, str):
            raise InvalidDependencyError(consumer, raw)
        return Dependency(component, destination, source, inject)

    raise InvalidDependencyError(consumer, raw)


def append_dependencies(
    consumer: str,
    existing: list[Dependency],
    declarations: Iterable[Any],
    inject: bool = True,
) -> list[Dependency]:
    """Return ``existing`` extended with the normalised ``declarations``.

    Each declaration is checked against everything declared before it, so the
    first clash is reported even within a single call.

    Raises:
        InvalidDependencyError: If a declaration does not name a component.
        DuplicateDependencyError: If two declarations share a destination.
    """
    dependencies = list(existing)
    destinations = {dependency.destination for dependency in dependencies}
    for raw in declarations:
        dependency = normalize_dependency(raw, consumer, inject)
        if dependency.destination in destinations:
            raise DuplicateDependencyError(consumer, dependency.destination)
        destinations.add(dependency.destination)
        dependencies.append(dependency)
    return dependencies
