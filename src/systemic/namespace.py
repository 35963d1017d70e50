"""Qualification of component names under a namespace prefix.

Including a set of definitions under a namespace lets the same sub-system be
composed more than once without name clashes, while its own wiring keeps
using short names.
"""

from collections.abc import Mapping
from dataclasses import replace
from typing import Optional

from systemic.domain import Definition, Dependency
from systemic.paths import SEPARATOR

__all__ = ["Namespace"]


class Namespace:
    """A name prefix such as ``"db"`` applied as ``"db.<name>"``.

    An empty or missing prefix leaves every name untouched.

    Example:
        >>> ns = Namespace("db")
        >>> ns.qualify("pool")
        'db.pool'
        >>> ns.unqualify("db.pool")
        'pool'
    """

    def __init__(self, prefix: Optional[str] = None):
        self.prefix = prefix or ""

    def __repr__(self) -> str:
        return f"Namespace({self.prefix!r})"

    def contains(self, name: str) -> bool:
        return bool(self.prefix) and (
            name == self.prefix or name.startswith(self.prefix + SEPARATOR)
        )

    def qualify(self, name: str) -> str:
        if not self.prefix or self.contains(name):
            return name
        return f"{self.prefix}{SEPARATOR}{name}"

    def unqualify(self, name: str) -> str:
        if not self.prefix or not name.startswith(self.prefix + SEPARATOR):
            return name
        return name[len(self.prefix) + len(SEPARATOR):]

    def qualify_definition(self, definition: Definition, local: Mapping[str, Definition]) -> Definition:
        """Copy ``definition`` into this namespace.

        Dependencies on names in ``local`` (the store the definition comes
        from) are qualified too; dependencies on anything else, and every
        destination, are kept as written. A local scoped dependency with no
        ``source`` is pinned to the consumer's unqualified name, so it keeps
        reading the slice it read before the store was namespaced.
        """
        qualified = definition.copy(self.qualify(definition.name))
        qualified.dependencies = [
            self._qualify_dependency(dependency, definition.name, local)
            for dependency in definition.dependencies
        ]
        return qualified

    def _qualify_dependency(
        self, dependency: Dependency, consumer: str, local: Mapping[str, Definition]
    ) -> Dependency:
        if dependency.component not in local:
            return dependency
        if local[dependency.component].scoped and not dependency.has_source:
            return replace(
                dependency, component=self.qualify(dependency.component), source=consumer
            )
        return replace(dependency, component=self.qualify(dependency.component))
