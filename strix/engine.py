"""
Bootstrap engine - wires a module into a running Application.

Steps:
1. Load configuration (unless given)
2. Build the DI container over the metadata store
3. Compile the module's routes
4. Freeze them into a RouteTable
5. Optionally invoke each handler once to simulate dispatch

Any failure aborts bootstrap; no partially built Application is returned.
"""

from typing import Any, Optional, Type, TypeVar, Union
from dataclasses import dataclass, field
import logging

from .config import StrixConfig, load_config
from .controller.compiler import RouteCompiler
from .controller.decorators import HttpMethod
from .controller.router import RouteTable
from .di.container import Container
from .di.diagnostics import DIDiagnostics, LoggingDiagnosticListener
from .faults import qualname
from .manifest import ModuleManifest, get_manifest
from .metadata import MetadataStore, default_store

logger = logging.getLogger("strix.bootstrap")

T = TypeVar("T")


@dataclass
class Application:
    """A bootstrapped module: its container and compiled routes."""

    module: Any
    manifest: ModuleManifest
    container: Container
    routes: RouteTable
    config: StrixConfig = field(default_factory=StrixConfig)

    def resolve(self, token: Type[T]) -> T:
        return self.container.resolve(token)

    def dispatch(self, verb: Union[HttpMethod, str], path: str, *args: Any, **kwargs: Any) -> Any:
        return self.routes.dispatch(verb, path, *args, **kwargs)


def bootstrap(
    module: Any,
    *,
    store: Optional[MetadataStore] = None,
    config: Optional[StrixConfig] = None,
) -> Application:
    """
    Bootstrap ``module`` and return the resulting Application.

    Args:
        module: Class decorated with ``@Module(...)``
        store: Metadata store the module was declared in (default store if None)
        config: Settings (loaded from file and environment if None)

    Raises:
        ManifestError, UnresolvableProviderError, CyclicDependencyError,
        DuplicateRouteError: Fatal bootstrap errors
    """
    store = store if store is not None else default_store
    config = config if config is not None else load_config()

    manifest = get_manifest(store, module)
    logger.info(
        "Bootstrapping %s (%d providers, %d controllers)",
        manifest.name or qualname(module),
        len(manifest.providers),
        len(manifest.controllers),
    )

    diagnostics = DIDiagnostics()
    if config.diagnostics:
        diagnostics.add_listener(LoggingDiagnosticListener())

    container = Container(store, diagnostics=diagnostics)
    compiler = RouteCompiler(container, store, config.duplicate_policy)
    routes = RouteTable(compiler.compile(module))

    if config.simulate_dispatch:
        simulate_dispatch(routes)

    logger.info(
        "Bootstrap complete: %d routes, %d instances",
        len(routes),
        len(container.instances()),
    )

    return Application(
        module=module,
        manifest=manifest,
        container=container,
        routes=routes,
        config=config,
    )


def simulate_dispatch(routes: RouteTable) -> None:
    """
    Invoke every compiled handler once, in compilation order, without
    arguments. Shadowed entries are invoked too.
    """
    for entry in routes:
        logger.debug("Invoking %s", entry.describe())
        try:
            entry.handler()
        except Exception:
            logger.error("Simulated dispatch failed for %s", entry.describe())
            raise
