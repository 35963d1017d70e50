"""Discovery of sub-systems laid out as packages on the filesystem.

Each child directory of the root that contains an ``__init__.py`` is imported
and expected to expose a ``system`` attribute: a system, a mapping of
component descriptors, or a zero-argument callable returning either.

Example layout::

    components/
        db/__init__.py        # system = System().add("db", Database())
        server/__init__.py    # def system(): return System().add("server", ...)
"""

import importlib.util
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any, Union

from systemic.definitions import Definitions

__all__ = ["discover", "UNIT_ATTRIBUTE"]

logger = logging.getLogger(__name__)

UNIT_ATTRIBUTE = "system"


def discover(path: Union[str, Path]) -> list[Any]:
    """Import every component package directly under ``path``.

    Packages are visited in name order. Descriptor mappings are turned into
    :class:`~systemic.definitions.Definitions`; anything else a package
    exposes is returned as is for the caller to include.

    Raises:
        FileNotFoundError: If ``path`` is not a directory.
        AttributeError: If a package does not expose a ``system`` attribute.
    """
    root = Path(path)
    if not root.is_dir():
        raise FileNotFoundError(f"Component directory {root} does not exist")

    units = []
    for directory in sorted(child for child in root.iterdir() if child.is_dir()):
        if not (directory / "__init__.py").is_file():
            continue
        module = _load(directory)
        if not hasattr(module, UNIT_ATTRIBUTE):
            raise AttributeError(
                f"Component package {directory} does not define '{UNIT_ATTRIBUTE}'"
            )
        units.append(_to_unit(getattr(module, UNIT_ATTRIBUTE)))
        logger.debug("Discovered component package %s", directory.name)
    return units


def _to_unit(exported: Any) -> Any:
    if callable(exported):
        exported = exported()
    if isinstance(exported, Mapping) and not isinstance(exported, Definitions):
        return Definitions.create(exported)
    return exported


def _load(directory: Path) -> ModuleType:
    module_name = f"_systemic_components_{abs(hash(str(directory.parent)))}_{directory.name}"
    spec = importlib.util.spec_from_file_location(
        module_name,
        directory / "__init__.py",
        submodule_search_locations=[str(directory)],
    )
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[module_name]
        raise
    return module
