"""Domain models used throughout the framework."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

__all__ = [
    "NO_SOURCE",
    "CONFIG",
    "Dependency",
    "Contract",
    "Definition",
    "LifecycleState",
]

CONFIG = "config"
"""Name of the canonical scoped component installed by ``configure``."""


class _NoSource:
    """Marker for a dependency that did not state a ``source``.

    An explicit ``source=""`` is meaningful (it asks for the whole value of a
    scoped component), so absence needs its own value.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_SOURCE"

    def __bool__(self) -> bool:
        return False


NO_SOURCE = _NoSource()


@dataclass(frozen=True)
class Dependency:
    """A dependency of one component on another.

    Attributes:
        component: Name of the component that produces the value.
        destination: Key under which the value is injected into the consumer.
        source: Optional dotted path projected out of the produced value.
            ``NO_SOURCE`` when the declaration did not state one.
        inject: False for ordering-only edges declared with ``comes_after``;
            these are sorted and validated but never injected.
    """

    component: str
    destination: str
    source: Union[str, _NoSource] = NO_SOURCE
    inject: bool = True

    @property
    def has_source(self) -> bool:
        return self.source is not NO_SOURCE


@dataclass(frozen=True)
class Contract:
    """The uniform shape every registered component is conformed to.

    ``start`` receives the resolved dependency map and returns the live
    component; ``stop`` takes no arguments. Either may return an awaitable.
    """

    start: Callable[[dict[str, Any]], Any]
    stop: Optional[Callable[[], Any]] = None


@dataclass
class Definition:
    """A stored component: its contract, dependency records and scoping."""

    name: str
    contract: Contract
    dependencies: list[Dependency] = field(default_factory=list)
    scoped: bool = False

    def copy(self, name: Optional[str] = None) -> "Definition":
        return Definition(
            name if name is not None else self.name,
            self.contract,
            list(self.dependencies),
            self.scoped,
        )


class LifecycleState(Enum):
    NEVER_STARTED = "never_started"
    STARTING = "starting"
    STARTED = "started"
    FAILED = "failed"
    STOPPING = "stopping"
    STOPPED = "stopped"
