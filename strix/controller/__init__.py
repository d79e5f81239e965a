"""
Strix Controller System

Class-based controllers whose methods are declared as routes.

Key Features:
- Decorators write metadata only, keyed by the function object
- Controllers are resolved through the DI container
- Full path = base path + method path, verbatim
- Compilation order follows the module manifest and class body

Example:
    from strix import Controller, GET, POST

    @Controller("/users")
    class UsersController:
        def __init__(self, users: UserService):
            self.users = users

        @GET("/")
        def list_users(self):
            return self.users.all()
"""

from .decorators import (
    HttpMethod,
    RouteDecorator,
    GET, POST,
    route,
)
from .compiler import (
    DuplicatePolicy,
    RouteCompiler,
    RouteEntry,
    compile_routes,
)
from .router import RouteTable
from .errors import (
    DecoratorTargetError,
    DuplicateRouteError,
    RouteNotFoundError,
)

__all__ = [
    # Decorators
    "HttpMethod",
    "RouteDecorator",
    "GET", "POST",
    "route",

    # Compilation
    "DuplicatePolicy",
    "RouteCompiler",
    "RouteEntry",
    "compile_routes",

    # Routing
    "RouteTable",

    # Errors
    "DecoratorTargetError",
    "DuplicateRouteError",
    "RouteNotFoundError",
]
