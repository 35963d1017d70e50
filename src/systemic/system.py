"""High level entry point for assembling and running a system.

Example:
    >>> system = (
    ...     System()
    ...     .configure({"server": {"port": 8080}})
    ...     .add("db", Database())
    ...     .depends_on("config")
    ...     .add("server", Server())
    ...     .depends_on("config", {"component": "db", "destination": "store"})
    ... )
    >>> components = await system.start()
    >>> await system.stop()
"""

import logging
import secrets
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from systemic.bootstrap import discover
from systemic.component_map import ComponentMap
from systemic.definitions import DEFAULT, Definitions
from systemic.domain import LifecycleState
from systemic.engine import LifecycleEngine
from systemic.errors import NoCurrentComponentError

__all__ = ["System", "ComponentChain"]

logger = logging.getLogger(__name__)


class System:
    """A named set of component definitions and the engine that runs them.

    Assembly methods return either the system or a :class:`ComponentChain`
    for the component just registered, so calls can be chained fluently.
    Assembly is expected to finish before ``start`` is called.
    """

    def __init__(self, name: Optional[str] = None, definitions: Optional[Definitions] = None):
        self.name = name or secrets.token_hex(8)
        self.definitions = definitions if definitions is not None else Definitions()
        self._engine = LifecycleEngine(self.name)

    def __repr__(self) -> str:
        return f"System({self.name!r}, {list(self.definitions)})"

    @classmethod
    def create(cls, descriptors: Mapping[str, Any], name: Optional[str] = None) -> "System":
        """Build a system from a ``{name: Descriptor-or-component}`` mapping."""
        return cls(name, Definitions.create(descriptors))

    @property
    def state(self) -> LifecycleState:
        return self._engine.state

    @property
    def started(self) -> list[str]:
        return self._engine.started

    @property
    def components(self) -> Optional[ComponentMap]:
        return self._engine.components

    def add(self, name: str, component: Any = DEFAULT, scoped: bool = False) -> "ComponentChain":
        logger.debug("Adding component %s to system %s", name, self.name)
        self.definitions.add(name, component, scoped)
        return ComponentChain(self, name)

    def set(self, name: str, component: Any = DEFAULT, scoped: bool = False) -> "ComponentChain":
        logger.debug("Setting component %s on system %s", name, self.name)
        self.definitions.set(name, component, scoped)
        return ComponentChain(self, name)

    def configure(self, component: Any) -> "ComponentChain":
        """Add the scoped ``config`` component."""
        definition = self.definitions.configure(component)
        logger.debug("Adding component %s to system %s", definition.name, self.name)
        return ComponentChain(self, definition.name)

    def remove(self, name: str) -> "System":
        logger.debug("Removing component %s from system %s", name, self.name)
        self.definitions.remove(name)
        return self

    def include(self, *others: Union["System", "ComponentChain", Definitions], namespace: Optional[str] = None) -> "System":
        """Merge the definitions of other systems into this one.

        Incoming definitions replace existing ones of the same name. With a
        ``namespace`` they are installed under that prefix.
        """
        stores = []
        for other in others:
            if isinstance(other, ComponentChain):
                other = other.system
            if isinstance(other, System):
                logger.debug(
                    "Including definitions from sub system %s into system %s",
                    other.name, self.name,
                )
                stores.append(other.definitions)
            else:
                stores.append(other)
        self.definitions.merge(*stores, namespace=namespace)
        return self

    merge = include

    def bootstrap(self, path: Union[str, Path]) -> "System":
        """Include every sub-system discovered under ``path``.

        See :func:`systemic.bootstrap.discover`.
        """
        for unit in discover(path):
            self.include(unit)
        return self

    def depends_on(self, *dependencies: Any) -> "ComponentChain":
        raise NoCurrentComponentError("depends_on")

    def comes_after(self, *dependencies: Any) -> "ComponentChain":
        raise NoCurrentComponentError("comes_after")

    async def start(self) -> ComponentMap:
        return await self._engine.start(self.definitions)

    async def stop(self) -> None:
        await self._engine.stop()

    async def restart(self) -> ComponentMap:
        await self.stop()
        return await self.start()


class ComponentChain:
    """Fluent handle on the component most recently added to a system.

    Dependency declarations attach to that component; every other method is
    forwarded to the system.
    """

    def __init__(self, system: System, name: str):
        self.system = system
        self.name = name

    def __repr__(self) -> str:
        return f"ComponentChain({self.system.name!r}, {self.name!r})"

    def depends_on(self, *dependencies: Any) -> "ComponentChain":
        """Declare dependencies whose values are injected into this component.

        Each dependency is a component name or a mapping with ``component``
        and optional ``destination`` and ``source`` keys.
        """
        self._attach("depends_on", dependencies, inject=True)
        return self

    def comes_after(self, *dependencies: Any) -> "ComponentChain":
        """Declare components that must start first without injecting them."""
        self._attach("comes_after", dependencies, inject=False)
        return self

    def _attach(self, method: str, dependencies: tuple, inject: bool) -> None:
        if self.name not in self.system.definitions:
            raise NoCurrentComponentError(method)
        self.system.definitions.depends_on(self.name, dependencies, inject)

    def add(self, name: str, component: Any = DEFAULT, scoped: bool = False) -> "ComponentChain":
        return self.system.add(name, component, scoped)

    def set(self, name: str, component: Any = DEFAULT, scoped: bool = False) -> "ComponentChain":
        return self.system.set(name, component, scoped)

    def configure(self, component: Any) -> "ComponentChain":
        return self.system.configure(component)

    def remove(self, name: str) -> System:
        return self.system.remove(name)

    def include(self, *others: Union[System, "ComponentChain", Definitions], namespace: Optional[str] = None) -> System:
        return self.system.include(*others, namespace=namespace)

    merge = include

    def bootstrap(self, path: Union[str, Path]) -> System:
        return self.system.bootstrap(path)

    async def start(self) -> ComponentMap:
        return await self.system.start()

    async def stop(self) -> None:
        await self.system.stop()

    async def restart(self) -> ComponentMap:
        return await self.system.restart()
