"""
Strix Dependency Injection

Synchronous singleton container with declared or annotated constructor
dependencies.

Key Features:
- One instance per registered class
- Dependencies resolved recursively in parameter order
- Cycle detection via an in-progress resolution stack
- Static graph analysis (Tarjan SCC, topological order, tree view)
- Pluggable diagnostics listeners
"""

from .container import (
    Container,
    ResolveCtx,
    constructor_dependencies,
)

from .graph import (
    DependencyGraph,
)

from .diagnostics import (
    DIDiagnostics,
    DIEvent,
    DIEventType,
    LoggingDiagnosticListener,
    RecordingDiagnosticListener,
)

from .errors import (
    DIError,
    UnresolvableProviderError,
    CyclicDependencyError,
)

__all__ = [
    # Core
    "Container",
    "ResolveCtx",
    "constructor_dependencies",

    # Graph
    "DependencyGraph",

    # Diagnostics
    "DIDiagnostics",
    "DIEvent",
    "DIEventType",
    "LoggingDiagnosticListener",
    "RecordingDiagnosticListener",

    # Errors
    "DIError",
    "UnresolvableProviderError",
    "CyclicDependencyError",
]
