"""Registration-time conformance of components to a uniform :class:`Contract`.

Anything can be registered as a component. What was registered is decided once,
when the definition is stored, and never inspected again:

    - :class:`Value` - a plain value; starting it returns the value unchanged.
    - :class:`Factory` - a callable invoked with the resolved dependencies.
    - :class:`Lifecycle` - an explicit pair of start and stop callables.
    - any object with a callable ``start`` attribute is treated as a lifecycle
      component, picking up ``stop`` if it has one.

Plain functions and classes are values, not factories: wrap them in :class:`Factory` to
have them called.

Example:
    >>> system.add("port", 8080)
    >>> system.add("db", Factory(lambda deps: connect(deps["config"])))
    >>> system.add("server", Lifecycle(start_server, stop_server))
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from systemic.domain import Contract
from systemic.errors import InvalidComponentError
from systemic.paths import get_path

__all__ = [
    "Value",
    "Factory",
    "Lifecycle",
    "Descriptor",
    "conform",
    "conform_descriptor",
    "pass_through",
]


@dataclass(frozen=True)
class Value:
    value: Any

    def as_contract(self) -> Contract:
        value = self.value
        return Contract(lambda _dependencies: value)


@dataclass(frozen=True)
class Factory:
    """A callable building the component from its dependency map."""

    func: Callable[[dict[str, Any]], Any]

    def as_contract(self) -> Contract:
        return Contract(self.func)


@dataclass(frozen=True)
class Lifecycle:
    start: Callable[[dict[str, Any]], Any]
    stop: Optional[Callable[[], Any]] = None

    def as_contract(self) -> Contract:
        return Contract(self.start, self.stop)


@dataclass(frozen=True)
class Descriptor:
    """Structured definition input: a component plus its dependency declarations.

    Attributes:
        init: The component itself, conformed like any registered component.
            When omitted, the component starts as its resolved dependency map
            (or as an empty dict if it only has ordering dependencies).
        depends_on: Dependency declarations whose values are injected.
        comes_after: Ordering-only dependency declarations.
        scoped: Whether consumers see only their own slice of the value.
            ``None`` means scoped exactly when the name is ``config``.
    """

    init: Any = None
    depends_on: Sequence[Any] = field(default_factory=tuple)
    comes_after: Sequence[Any] = field(default_factory=tuple)
    scoped: Optional[bool] = None


def conform(name: str, component: Any) -> Contract:
    """Resolve a registered component into its :class:`Contract`.

    Raises:
        InvalidComponentError: If ``component`` is ``None``.
    """
    if component is None:
        raise InvalidComponentError(name)
    if isinstance(component, Contract):
        return component
    if isinstance(component, (Value, Factory, Lifecycle)):
        return component.as_contract()
    if inspect.isclass(component):
        return Value(component).as_contract()
    start = getattr(component, "start", None)
    if callable(start):
        stop = getattr(component, "stop", None)
        return Contract(start, stop if callable(stop) else None)
    return Value(component).as_contract()


def conform_descriptor(name: str, descriptor: Descriptor) -> Contract:
    if descriptor.init is not None:
        return conform(name, descriptor.init)
    if descriptor.depends_on:
        return Contract(lambda dependencies: dependencies)
    if descriptor.comes_after:
        return Contract(lambda _dependencies: {})
    raise InvalidComponentError(name)


def pass_through(name: str) -> Contract:
    """Contract for a component added without one of its own.

    It starts as the value found under its own name in its dependency map,
    which is how a parent name groups the values of its dotted children. A
    component with an empty name starts as the whole map.
    """
    if not name:
        return Contract(lambda dependencies: dependencies)
    return Contract(lambda dependencies: get_path(dependencies, name))
