"""
Route Compiler - turns a module manifest into an ordered route table.

For each controller the compiler resolves an instance through the DI
container, walks the functions declared in the controller's class body in
declaration order, and emits one RouteEntry per function carrying both
``method`` and ``path`` metadata. The full path is the literal
concatenation of base path and method path; nothing is normalised.

Compilation has no side effects beyond provider construction: handlers
are never invoked here.
"""

from typing import Any, Dict, List, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum
import logging

from ..di.container import Container
from ..faults import qualname
from ..manifest import get_manifest
from ..metadata import ABSENT, BASE_PATH, METHOD, PATH, MetadataStore, default_store
from .decorators import HttpMethod
from .errors import DuplicateRouteError

logger = logging.getLogger("strix.controller")


class DuplicatePolicy(str, Enum):
    """What to do when two handlers share a verb and full path."""

    ALLOW = "allow"  # keep both silently; the later one shadows on lookup
    WARN = "warn"    # keep both, log a warning
    ERROR = "error"  # abort compilation


@dataclass(frozen=True)
class RouteEntry:
    """A compiled route: verb and full path bound to a controller method."""

    verb: HttpMethod
    full_path: str
    owner: Any
    method_name: str
    # Class-body member as scanned; may be a staticmethod or classmethod wrapper
    function: Any = field(default=None, repr=False, compare=False)

    @property
    def controller(self) -> type:
        return type(self.owner)

    @property
    def handler(self):
        """
        The scanned member bound to its owning instance.

        Instance attributes of the same name are never consulted.
        """
        if self.function is None:
            return getattr(self.owner, self.method_name)
        return self.function.__get__(self.owner, type(self.owner))

    @property
    def key(self) -> Tuple[HttpMethod, str]:
        return (self.verb, self.full_path)

    def describe(self) -> str:
        return f"{self.verb.value} {self.full_path} -> {self.controller.__name__}.{self.method_name}()"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.verb.value,
            "path": self.full_path,
            "controller": f"{self.controller.__module__}:{self.controller.__qualname__}",
            "handler": self.method_name,
        }


class RouteCompiler:
    """
    Compiles module manifests into RouteEntry sequences.

    Ordering guarantees:
    - providers are resolved in manifest order
    - controllers are resolved and scanned in manifest order
    - methods are scanned in class-body declaration order
    """

    def __init__(
        self,
        container: Container,
        store: Optional[MetadataStore] = None,
        duplicate_policy: Union[DuplicatePolicy, str] = DuplicatePolicy.WARN,
    ):
        self.container = container
        self.store = store if store is not None else container.store
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)

    def compile(self, module: Any) -> List[RouteEntry]:
        """
        Compile every controller of ``module``.

        Raises:
            ManifestError: If ``module`` has no manifest
            UnresolvableProviderError: If a provider or controller cannot be built
            CyclicDependencyError: If the provider graph has a cycle
            DuplicateRouteError: On a duplicate route under the ERROR policy
        """
        manifest = get_manifest(self.store, module)

        for provider in manifest.providers:
            self.container.register(provider)
        for controller in manifest.controllers:
            self.container.register(controller)

        # Eager: singletons exist before any controller asks for them
        for provider in manifest.providers:
            self.container.resolve(provider)

        entries: List[RouteEntry] = []
        seen: Dict[Tuple[HttpMethod, str], RouteEntry] = {}

        for controller in manifest.controllers:
            for entry in self.compile_controller(controller):
                self._check_duplicate(entry, seen.get(entry.key))
                seen[entry.key] = entry
                entries.append(entry)

        for entry in entries:
            logger.info("Mapped %s", entry.describe())

        return entries

    def compile_controller(self, controller: type) -> List[RouteEntry]:
        """Resolve ``controller`` and emit an entry for each decorated method."""
        instance = self.container.resolve(controller)

        base_path = self.store.get(controller, BASE_PATH)
        if base_path is ABSENT:
            base_path = ""

        entries = []
        for name, member in vars(controller).items():
            if name == "__init__":
                continue

            target = member
            if isinstance(member, (staticmethod, classmethod)) and not self.store.has(member, METHOD):
                target = member.__func__

            verb = self.store.get(target, METHOD)
            path = self.store.get(target, PATH)
            if verb is ABSENT or path is ABSENT:
                continue

            entries.append(RouteEntry(
                verb=HttpMethod.coerce(verb),
                full_path=base_path + path,
                owner=instance,
                method_name=name,
                function=member,
            ))

        if not entries:
            logger.debug("Controller %s declares no routes", qualname(controller))

        return entries

    def _check_duplicate(self, entry: RouteEntry, previous: Optional[RouteEntry]) -> None:
        if previous is None or self.duplicate_policy is DuplicatePolicy.ALLOW:
            return

        first = f"{previous.controller.__name__}.{previous.method_name}()"
        second = f"{entry.controller.__name__}.{entry.method_name}()"

        if self.duplicate_policy is DuplicatePolicy.ERROR:
            raise DuplicateRouteError(entry.verb.value, entry.full_path, first, second)

        logger.warning(
            "Route %s %s is declared twice; %s shadows %s",
            entry.verb.value, entry.full_path, second, first,
        )


def compile_routes(
    module: Any,
    *,
    store: Optional[MetadataStore] = None,
    container: Optional[Container] = None,
    duplicate_policy: Union[DuplicatePolicy, str] = DuplicatePolicy.WARN,
) -> List[RouteEntry]:
    """
    Compile ``module`` with a fresh container unless one is supplied.
    """
    store = store if store is not None else default_store
    if container is None:
        container = Container(store)
    return RouteCompiler(container, store, duplicate_policy).compile(module)
