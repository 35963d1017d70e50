"""Storage of component definitions.

A :class:`Definitions` store maps component names to :class:`Definition`
records in insertion order. Everything the assembly API does ends up here:
components are added, replaced or removed, dependency declarations are
normalised and appended, and whole stores are merged into one another.
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Iterator, Optional

from systemic.components import Descriptor, conform, conform_descriptor, pass_through
from systemic.dependencies import append_dependencies
from systemic.domain import CONFIG, Definition
from systemic.errors import DuplicateComponentError
from systemic.namespace import Namespace

__all__ = ["Definitions", "DEFAULT"]

logger = logging.getLogger(__name__)


class _Default:
    def __repr__(self) -> str:
        return "DEFAULT"


DEFAULT = _Default()
"""Marker for a component registered without a contract of its own."""


class Definitions(Mapping):
    """Insertion-ordered mapping from component name to :class:`Definition`."""

    def __init__(self, definitions: Optional[Iterable[Definition]] = None):
        self._definitions: dict[str, Definition] = {}
        for definition in definitions or ():
            self._definitions[definition.name] = definition

    def __getitem__(self, name: str) -> Definition:
        return self._definitions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"Definitions({list(self._definitions)})"

    def add(self, name: str, component: Any = DEFAULT, scoped: bool = False) -> Definition:
        """Register a new component.

        Args:
            name: The component name; must not already be registered.
            component: The component, conformed by :func:`~systemic.components.conform`.
                When omitted the component passes through the value injected
                under its own name.
            scoped: Whether consumers receive only their own slice of the value.

        Raises:
            DuplicateComponentError: If ``name`` is already registered.
            InvalidComponentError: If ``component`` is ``None``.
        """
        if name in self._definitions:
            raise DuplicateComponentError(name)
        return self.set(name, component, scoped)

    def set(self, name: str, component: Any = DEFAULT, scoped: bool = False) -> Definition:
        """Register a component, replacing any existing definition of ``name``."""
        contract = pass_through(name) if component is DEFAULT else conform(name, component)
        definition = Definition(name, contract, [], scoped)
        self._definitions[name] = definition
        return definition

    def configure(self, component: Any) -> Definition:
        return self.add(CONFIG, component, scoped=True)

    def remove(self, name: str) -> None:
        self._definitions.pop(name, None)

    def depends_on(self, name: str, declarations: Iterable[Any], inject: bool = True) -> Definition:
        """Append dependency declarations to the definition of ``name``.

        Raises:
            KeyError: If ``name`` is not registered.
            InvalidDependencyError: If a declaration does not name a component.
            DuplicateDependencyError: If two declarations share a destination.
        """
        definition = self._definitions[name]
        definition.dependencies = append_dependencies(
            name, definition.dependencies, declarations, inject
        )
        return definition

    def describe(self, name: str, descriptor: Descriptor) -> Definition:
        """Register a component from a structured :class:`Descriptor`."""
        if name in self._definitions:
            raise DuplicateComponentError(name)
        scoped = descriptor.scoped if descriptor.scoped is not None else name == CONFIG
        definition = Definition(name, conform_descriptor(name, descriptor), [], scoped)
        definition.dependencies = append_dependencies(name, [], descriptor.depends_on)
        definition.dependencies = append_dependencies(
            name, definition.dependencies, descriptor.comes_after, inject=False
        )
        self._definitions[name] = definition
        return definition

    def merge(self, *others: "Definitions", namespace: Optional[str] = None) -> None:
        """Copy the definitions of ``others`` into this store.

        On a name clash the incoming definition wins, and later stores win
        over earlier ones. With a ``namespace`` every incoming name is
        qualified, as are dependencies between incoming definitions.
        """
        resolver = Namespace(namespace)
        for other in others:
            for definition in other.values():
                incoming = resolver.qualify_definition(definition, other) if namespace else definition.copy()
                if incoming.name in self._definitions:
                    logger.debug("Definition of %s replaced by merge", incoming.name)
                self._definitions[incoming.name] = incoming

    def copy(self) -> "Definitions":
        return Definitions(definition.copy() for definition in self._definitions.values())

    @classmethod
    def create(cls, descriptors: Mapping[str, Any]) -> "Definitions":
        """Build a store from a ``{name: descriptor-or-component}`` mapping."""
        definitions = cls()
        for name, value in descriptors.items():
            if isinstance(value, Descriptor):
                definitions.describe(name, value)
            else:
                definitions.add(name, value, scoped=name == CONFIG)
        return definitions
