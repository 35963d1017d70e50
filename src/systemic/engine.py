"""Starting and stopping components in dependency order.

The :class:`LifecycleEngine` drives one system through its lifecycle::

    NEVER_STARTED -> STARTING -> STARTED -> STOPPING -> STOPPED -> STARTING ...
                         |
                         +-> FAILED -> STOPPING -> STOPPED

Start validates and sorts the definitions before anything runs, then starts
each component dependencies first, awaiting each one before the next. A name
is recorded as started *before* its start operation is invoked, so a
component whose start raises is still asked to stop; its dependents, which
never ran, are not.

Stop is best effort: every started component is asked to stop, dependents
first, even if an earlier one fails. A single failure is re-raised as is;
several are raised together as a :class:`~systemic.errors.StopError`.
"""

import inspect
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from systemic.component_map import ComponentMap
from systemic.domain import Definition, LifecycleState
from systemic.errors import (
    ComponentCollisionError,
    StopError,
    SystemStateError,
    UnsatisfiedDependencyError,
)
from systemic.graph import sort_definitions
from systemic.paths import SEPARATOR, get_path, set_path

__all__ = [
    "LifecycleEngine",
    "install_component",
    "resolve_dependencies",
    "validate_dependencies",
]

logger = logging.getLogger(__name__)


async def _settle(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


def validate_dependencies(definitions: Mapping[str, Definition]) -> None:
    """Check that every declared dependency names a stored definition.

    Raises:
        UnsatisfiedDependencyError: Naming the first consumer, in store order,
            with a missing dependency.
    """
    for name, definition in definitions.items():
        for dependency in definition.dependencies:
            if dependency.component not in definitions:
                raise UnsatisfiedDependencyError(name, dependency.component)


def resolve_dependencies(
    definitions: Mapping[str, Definition], name: str, components: dict[str, Any]
) -> dict[str, Any]:
    """Build the dependency map injected into the start of ``name``.

    A dependency on a scoped component that states no ``source`` is given
    the consumer's own slice of it, i.e. its ``source`` defaults to the
    consumer's name. Ordering-only dependencies are not injected.
    """
    resolved: dict[str, Any] = {}
    for dependency in definitions[name].dependencies:
        if not dependency.inject:
            continue
        if dependency.component not in definitions:
            raise UnsatisfiedDependencyError(name, dependency.component)

        source = dependency.source
        if not dependency.has_source and definitions[dependency.component].scoped:
            source = name

        value = get_path(components, dependency.component)
        if source:
            logger.debug(
                "Injecting dependency %s.%s as %s into %s",
                dependency.component, source, dependency.destination, name,
            )
            value = get_path(value, source)
        else:
            logger.debug(
                "Injecting dependency %s as %s into %s",
                dependency.component, dependency.destination, name,
            )
        set_path(resolved, dependency.destination, value)
    return resolved


def install_component(
    components: dict[str, Any], values: dict[str, Any], name: str, value: Any
) -> None:
    """Write a started component's value into the nested components map.

    ``values`` holds every component installed so far by name. A dotted name
    is only placed inside a started ancestor whose value is a mutable
    mapping, and a value may not hide a started descendant.

    Raises:
        ComponentCollisionError: Naming ``name`` and the started component
            it collides with.
    """
    for other, other_value in values.items():
        if name.startswith(other + SEPARATOR) and not isinstance(other_value, MutableMapping):
            raise ComponentCollisionError(name, other)

    set_path(components, name, value)

    for other, other_value in values.items():
        if other.startswith(name + SEPARATOR) and get_path(components, other) is not other_value:
            raise ComponentCollisionError(name, other)
    values[name] = value


class LifecycleEngine:
    """Start/stop state machine for the components of one system."""

    def __init__(self, name: str):
        self.name = name
        self.state = LifecycleState.NEVER_STARTED
        self._started: list[str] = []
        self._running: Optional[dict[str, Definition]] = None
        self._components: Optional[ComponentMap] = None

    @property
    def started(self) -> list[str]:
        """Names whose start was attempted in the current run, in start order."""
        return list(self._started)

    @property
    def components(self) -> Optional[ComponentMap]:
        return self._components

    async def start(self, definitions: Mapping[str, Definition]) -> ComponentMap:
        """Start every component, dependencies first.

        Returns the cached components without starting anything if the
        engine is already started.

        Raises:
            UnsatisfiedDependencyError: If a dependency names no definition.
            CyclicDependencyError: If the dependencies form a cycle.
            SystemStateError: If a previous start failed and has not been
                cleaned up with ``stop``, or a start or stop is in progress.
            ComponentCollisionError: If a started value cannot sit beside a
                component with a dotted name inside it.
            Exception: Whatever a component's start operation raised.
        """
        if self.state is LifecycleState.STARTED:
            return self._components
        if self.state not in (LifecycleState.NEVER_STARTED, LifecycleState.STOPPED):
            raise SystemStateError(
                f"Cannot start system {self.name} while it is {self.state.value}"
            )

        logger.info("Starting system %s", self.name)
        previous = self.state
        running = dict(definitions)
        try:
            validate_dependencies(running)
            order = list(reversed(sort_definitions(running)))
        except Exception:
            self.state = previous
            raise

        self.state = LifecycleState.STARTING
        self._started = []
        self._running = running
        components: dict[str, Any] = {}
        values: dict[str, Any] = {}
        try:
            for name in order:
                dependencies = resolve_dependencies(running, name, components)
                logger.debug("Starting component %s", name)
                self._started.append(name)
                value = await _settle(running[name].contract.start(dependencies))
                install_component(components, values, name, value)
                logger.debug("Component %s started", name)
        except BaseException:
            self.state = LifecycleState.FAILED
            logger.debug(
                "System %s failed to start after attempting %s", self.name, self._started
            )
            raise

        self._components = ComponentMap(components)
        self.state = LifecycleState.STARTED
        logger.info("System %s started", self.name)
        return self._components

    async def stop(self) -> None:
        """Stop every component that was started, dependents first.

        Does nothing if the engine was never started or is already stopped.
        """
        if self.state in (LifecycleState.NEVER_STARTED, LifecycleState.STOPPED):
            logger.debug("System %s is not running", self.name)
            return
        if self.state not in (LifecycleState.STARTED, LifecycleState.FAILED):
            raise SystemStateError(
                f"Cannot stop system {self.name} while it is {self.state.value}"
            )

        logger.info("Stopping system %s", self.name)
        self.state = LifecycleState.STOPPING
        running = self._running or {}
        started = set(self._started)
        errors: list[Exception] = []
        try:
            for name in sort_definitions(running):
                if name not in started:
                    continue
                stop = running[name].contract.stop
                if stop is None:
                    continue
                logger.debug("Stopping component %s", name)
                try:
                    await _settle(stop())
                except Exception as error:
                    logger.exception("Component %s of system %s failed to stop", name, self.name)
                    errors.append(error)
                else:
                    logger.debug("Component %s stopped", name)
        finally:
            self.state = LifecycleState.STOPPED
            self._started = []
            self._running = None
            self._components = None

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise StopError(self.name, errors)
        logger.info("System %s stopped", self.name)
