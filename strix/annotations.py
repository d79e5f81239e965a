"""
Annotation layer - declaration-time attachment of metadata.

Each decorator only writes facts into a MetadataStore and returns its
target unchanged. ``Annotations`` binds the decorators to one store; the
module-level names (``Controller``, ``Injectable``, ``Module``, ``GET``,
``POST``, ``route``) are bound to the process default store.

Example:
    @Injectable()
    class UserService:
        ...

    @Controller("/users")
    class UserController:
        def __init__(self, users: UserService):
            self.users = users

        @GET("/")
        def list_users(self):
            ...

    @Module(providers=[UserService], controllers=[UserController])
    class AppModule:
        pass
"""

from typing import Any, Callable, Iterable, Optional, TypeVar, Union
import inspect

from .controller.decorators import HttpMethod, RouteDecorator, route as _route
from .controller.errors import DecoratorTargetError
from .manifest import ModuleManifest
from .metadata import (
    BASE_PATH,
    INJECTABLE,
    MODULE_METADATA,
    PARAMTYPES,
    MetadataStore,
    default_store,
)

C = TypeVar("C", bound=type)


class Annotations:
    """Decorator factory writing into a single MetadataStore."""

    def __init__(self, store: Optional[MetadataStore] = None):
        self.store = store if store is not None else default_store

    def controller(
        self,
        base_path: str = "",
        *,
        depends_on: Optional[Iterable[type]] = None,
    ) -> Callable[[C], C]:
        """
        Mark a class as a controller mounted at ``base_path``.

        Args:
            base_path: Prefix concatenated verbatim with each route path
            depends_on: Explicit ordered constructor dependencies
        """
        if not isinstance(base_path, str):
            raise DecoratorTargetError("Controller", base_path, expected="a base path string argument")

        def decorator(cls: C) -> C:
            self._require_class("Controller", cls)
            self.store.set(cls, BASE_PATH, base_path)
            self._declare_dependencies(cls, depends_on)
            return cls

        return decorator

    def injectable(
        self,
        *,
        depends_on: Optional[Iterable[type]] = None,
    ) -> Callable[[C], C]:
        """
        Mark a class as a DI-managed service.

        The flag is informational: resolution does not require it.
        """
        def decorator(cls: C) -> C:
            self._require_class("Injectable", cls)
            self.store.set(cls, INJECTABLE, True)
            self._declare_dependencies(cls, depends_on)
            return cls

        return decorator

    def route(self, method: Union[HttpMethod, str], path: str) -> RouteDecorator:
        return _route(method, path, store=self.store)

    def get(self, path: str) -> RouteDecorator:
        return _route(HttpMethod.GET, path, store=self.store)

    def post(self, path: str) -> RouteDecorator:
        return _route(HttpMethod.POST, path, store=self.store)

    def module(
        self,
        *,
        providers: Iterable[Any] = (),
        controllers: Iterable[Any] = (),
        name: Optional[str] = None,
    ) -> Callable[[C], C]:
        """Attach a ModuleManifest listing providers and controllers."""
        def decorator(cls: C) -> C:
            self._require_class("Module", cls)
            manifest = ModuleManifest(
                providers=providers,
                controllers=controllers,
                name=name or cls.__name__,
            )
            self.store.set(cls, MODULE_METADATA, manifest)
            return cls

        return decorator

    def declare(
        self,
        cls: type,
        *,
        base_path: Optional[str] = None,
        injectable: bool = False,
        depends_on: Optional[Iterable[type]] = None,
    ) -> type:
        """
        Register class-level facts without decorator syntax.

        Useful for third-party classes that cannot be decorated.
        """
        self._require_class("declare", cls)
        if base_path is not None:
            self.controller(base_path)(cls)
        if injectable:
            self.store.set(cls, INJECTABLE, True)
        self._declare_dependencies(cls, depends_on)
        return cls

    def _declare_dependencies(self, cls: type, depends_on: Optional[Iterable[type]]) -> None:
        if depends_on is not None:
            self.store.set(cls, PARAMTYPES, tuple(depends_on))

    @staticmethod
    def _require_class(decorator: str, target: Any) -> None:
        if not inspect.isclass(target):
            raise DecoratorTargetError(decorator, target, expected="a class")


_default = Annotations(default_store)

Controller = _default.controller
Injectable = _default.injectable
Module = _default.module
declare = _default.declare
GET = _default.get
POST = _default.post
route = _default.route
