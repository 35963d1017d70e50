"""Systemic component lifecycle framework.

Systemic assembles process-wide services (servers, loggers, database handles)
from independently defined components. Each component declares the names it
depends on; the framework computes a valid initialisation order, starts every
component with its resolved dependencies, and later stops them in reverse.

Key Features:
    - Fluent assembly with ``add``/``set``/``depends_on``/``comes_after``
    - Any value can be a component; lifecycle components start and stop
    - Deterministic start order with cycle detection
    - Scoped components such as ``config`` sliced per consumer
    - Composition of sub-systems, optionally under a namespace
    - Partial-failure cleanup: only components that were started are stopped

Basic Usage:
    >>> from systemic.system import System
    >>>
    >>> system = (
    ...     System()
    ...     .configure({"db": {"url": "sqlite://"}})
    ...     .add("db", Database())
    ...     .depends_on("config")
    ... )
    >>> components = await system.start()
    >>> db = components["db"]
    >>> await system.stop()

The framework consists of several core modules:
    - system: The assembly API and entry point
    - definitions: Storage of component definitions
    - dependencies: Normalisation of dependency declarations
    - components: Conformance of registered values to a uniform contract
    - graph: Topological sorting with cycle detection
    - engine: The start/stop state machine
    - namespace: Qualified names for composed sub-systems
    - bootstrap: Discovery of sub-systems on the filesystem
    - runner: Signal handling for a system run as a process
    - errors: Framework-specific exceptions
"""
