"""
Controller and routing errors.
"""

from typing import Any

from ..faults import FaultDomain, StrixError, qualname


class DecoratorTargetError(StrixError):
    """A decorator was applied to something it cannot annotate."""

    code = "DECORATOR_TARGET"
    domain = FaultDomain.ANNOTATE

    def __init__(self, decorator: str, target: Any, expected: str = "a method"):
        self.decorator = decorator
        self.target = target
        super().__init__(
            f"@{decorator} can only be applied to {expected}, "
            f"got {type(target).__name__} {qualname(target)}",
            metadata={"decorator": decorator, "target": qualname(target)},
        )


class DuplicateRouteError(StrixError):
    """Two handlers were compiled for the same verb and path."""

    code = "DUPLICATE_ROUTE"
    domain = FaultDomain.ROUTING

    def __init__(self, verb: str, path: str, first: str, second: str):
        self.verb = verb
        self.path = path
        super().__init__(
            f"Duplicate route {verb} {path}: {second} would shadow {first}",
            metadata={"verb": verb, "path": path, "first": first, "second": second},
        )


class RouteNotFoundError(StrixError):
    """No compiled route matches the verb and path."""

    code = "ROUTE_NOT_FOUND"
    domain = FaultDomain.ROUTING

    def __init__(self, verb: Any, path: str):
        self.verb = verb
        self.path = path
        super().__init__(
            f"No route for {getattr(verb, 'value', verb)} {path}",
            metadata={"verb": str(getattr(verb, "value", verb)), "path": path},
        )
