"""
Strix - annotation-driven bootstrap for controllers and services.

Classes are decorated with routing and dependency-injection metadata;
``bootstrap`` reads that metadata to build a singleton container and an
ordered route table.

Example:
    from strix import Controller, Injectable, Module, GET, POST, bootstrap

    @Injectable()
    class UserService:
        def all(self):
            return []

    @Controller("/users")
    class UserController:
        def __init__(self, users: UserService):
            self.users = users

        @GET("/")
        def getAllUsers(self):
            return self.users.all()

    @Module(providers=[UserService], controllers=[UserController])
    class AppModule:
        pass

    app = bootstrap(AppModule)
    app.dispatch("GET", "/users/")
"""

__version__ = "0.1.0"

from .metadata import (
    ABSENT,
    MetadataStore,
    default_store,
)

from .annotations import (
    Annotations,
    Controller,
    Injectable,
    Module,
    declare,
    GET,
    POST,
    route,
)

from .manifest import (
    ModuleManifest,
    ManifestError,
)

from .di import (
    Container,
    DependencyGraph,
    UnresolvableProviderError,
    CyclicDependencyError,
)

from .controller import (
    HttpMethod,
    DuplicatePolicy,
    RouteCompiler,
    RouteEntry,
    RouteTable,
    compile_routes,
    DecoratorTargetError,
    DuplicateRouteError,
    RouteNotFoundError,
)

from .config import (
    ConfigError,
    ConfigLoader,
    StrixConfig,
    load_config,
)

from .engine import (
    Application,
    bootstrap,
)

from .faults import StrixError

__all__ = [
    # Metadata
    "ABSENT",
    "MetadataStore",
    "default_store",

    # Annotations
    "Annotations",
    "Controller",
    "Injectable",
    "Module",
    "declare",
    "GET",
    "POST",
    "route",

    # Modules
    "ModuleManifest",

    # DI
    "Container",
    "DependencyGraph",

    # Routing
    "HttpMethod",
    "DuplicatePolicy",
    "RouteCompiler",
    "RouteEntry",
    "RouteTable",
    "compile_routes",

    # Config
    "ConfigLoader",
    "StrixConfig",
    "load_config",

    # Bootstrap
    "Application",
    "bootstrap",

    # Errors
    "StrixError",
    "ManifestError",
    "UnresolvableProviderError",
    "CyclicDependencyError",
    "DecoratorTargetError",
    "DuplicateRouteError",
    "RouteNotFoundError",
    "ConfigError",
]
