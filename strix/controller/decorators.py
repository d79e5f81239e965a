"""
Controller Method Decorators

HTTP method decorators for controller methods.
Attach metadata to the function object without any other side effect.
"""

from enum import Enum
from typing import Any, Callable, Optional, TypeVar, Union

from ..metadata import METHOD, PATH, MetadataStore, default_store
from .errors import DecoratorTargetError


F = TypeVar('F', bound=Callable[..., Any])


class HttpMethod(str, Enum):
    """Verbs a route can be declared with."""

    GET = "GET"
    POST = "POST"

    @classmethod
    def coerce(cls, value: Union["HttpMethod", str]) -> "HttpMethod":
        """
        Normalise ``value`` to an HttpMethod.

        Raises:
            ValueError: If ``value`` names no supported verb
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(value.upper())
        raise ValueError(f"{value!r} is not an HTTP method")


class RouteDecorator:
    """
    Base route decorator.

    Writes ``method`` and ``path`` metadata keyed by the decorated function
    itself, so every instance of the owning class shares the same facts.
    """

    method: Optional[HttpMethod] = None

    def __init__(self, path: str, *, store: Optional[MetadataStore] = None):
        """
        Args:
            path: Route path appended verbatim to the controller base path
            store: Metadata store to write into (process default if None)
        """
        if not isinstance(path, str):
            raise DecoratorTargetError(self._name(), path, expected="a path string argument")
        self.path = path
        self.store = store if store is not None else default_store

    def _name(self) -> str:
        return self.method.value if self.method else type(self).__name__

    def __call__(self, func: F) -> F:
        """
        Annotate ``func`` and return it unchanged.

        A staticmethod or classmethod wrapper is accepted in either decorator
        order; the metadata lands on the wrapped function.
        """
        target = func.__func__ if isinstance(func, (staticmethod, classmethod)) else func
        if not callable(target) or isinstance(target, type):
            raise DecoratorTargetError(self._name(), func)

        self.store.set(target, METHOD, self.method)
        self.store.set(target, PATH, self.path)
        return func


class GET(RouteDecorator):
    """GET request decorator."""

    method = HttpMethod.GET


class POST(RouteDecorator):
    """POST request decorator."""

    method = HttpMethod.POST


_DECORATORS = {
    HttpMethod.GET: GET,
    HttpMethod.POST: POST,
}


def route(
    method: Union[HttpMethod, str],
    path: str,
    *,
    store: Optional[MetadataStore] = None,
) -> RouteDecorator:
    """
    Generic route decorator.

    Example:
        @route("GET", "/")
        def list_users(self):
            ...
    """
    try:
        verb = HttpMethod.coerce(method)
    except ValueError:
        raise DecoratorTargetError(
            "route", method, expected=f"one of {[m.value for m in HttpMethod]}"
        ) from None

    return _DECORATORS[verb](path, store=store)
