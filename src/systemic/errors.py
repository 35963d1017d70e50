"""Exceptions raised while assembling, starting and stopping a system."""

from typing import Any, Sequence

__all__ = [
    "SystemicError",
    "InvalidComponentError",
    "DuplicateComponentError",
    "NoCurrentComponentError",
    "ComponentCollisionError",
    "DependencyError",
    "InvalidDependencyError",
    "DuplicateDependencyError",
    "UnsatisfiedDependencyError",
    "CyclicDependencyError",
    "SystemStateError",
    "StopError",
]


class SystemicError(Exception):
    """Base class for every error raised by the framework itself."""

    pass


class InvalidComponentError(SystemicError):
    """Raised when ``None`` is registered as a component."""

    def __init__(self, component: str):
        super().__init__(f"Component {component} is null or undefined")
        self.component = component


class DuplicateComponentError(SystemicError):
    """Raised when ``add`` is used with a name that is already registered."""

    def __init__(self, component: str):
        super().__init__(f"Duplicate component: {component}")
        self.component = component


class NoCurrentComponentError(SystemicError):
    """Raised when a dependency is declared before any component was added."""

    def __init__(self, method: str = "depends_on"):
        super().__init__(f"You must add a component before calling {method}")


class ComponentCollisionError(SystemicError):
    """Raised when a dotted component name cannot be placed beside another.

    ``foo.bar`` lives inside the value of ``foo``, so ``foo`` must start as a
    mutable mapping and must keep ``foo.bar`` if it starts after it.

    Attributes:
        component: The component whose value was being installed.
        other: The started component it collides with.
    """

    def __init__(self, component: str, other: str):
        super().__init__(f"Component {component} collides with component {other}")
        self.component = component
        self.other = other


class DependencyError(SystemicError):
    """Raised when a component's dependency cannot be declared or resolved."""

    pass


class InvalidDependencyError(DependencyError):
    """Raised when a dependency declaration is neither a name nor a record."""

    def __init__(self, component: str, dependency: Any):
        super().__init__(
            f"Component {component} has an invalid dependency {_render(dependency)}"
        )
        self.component = component
        self.dependency = dependency


class DuplicateDependencyError(DependencyError):
    """Raised when two dependencies of a component share a destination."""

    def __init__(self, component: str, destination: str):
        super().__init__(
            f"Component {component} has a duplicate dependency {destination}"
        )
        self.component = component
        self.destination = destination


class UnsatisfiedDependencyError(DependencyError):
    """Raised when a dependency names a component that is not defined."""

    def __init__(self, component: str, dependency: str):
        super().__init__(
            f"Component {component} has an unsatisfied dependency on {dependency}"
        )
        self.component = component
        self.dependency = dependency


class CyclicDependencyError(DependencyError):
    """Raised when the dependency graph contains a cycle.

    Attributes:
        chain: The names along the cycle, starting and ending with the node
            that depends on itself.
    """

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(
            f"Cyclic dependency found. {self.chain[-1]} is dependent of itself. "
            f"Dependency chain: {' -> '.join(self.chain)}"
        )


class SystemStateError(SystemicError):
    """Raised when start or stop is called in a state that does not allow it."""

    pass


class StopError(SystemicError):
    """Raised when more than one component failed to stop.

    Attributes:
        errors: The exceptions raised by the failing stop operations, in the
            order they occurred.
    """

    def __init__(self, system: str, errors: Sequence[BaseException]):
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} components of system {system} failed to stop: "
            + "; ".join(repr(e) for e in self.errors)
        )


def _render(value: Any) -> str:
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k!r}: {v!r}" for k, v in value.items()) + "}"
    return repr(value) if isinstance(value, str) else str(value)
