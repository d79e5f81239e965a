"""
Singleton container and the recursive dependency resolver.

A class's dependencies are its declared ``paramtypes`` metadata when
present, otherwise the annotated required positional parameters of its
``__init__``. Each registered class is constructed at most once per
container.

Precondition: all decoration has finished before the first ``resolve``.
Interleaving registration and resolution is not supported.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar, get_type_hints
import inspect
import logging

from ..faults import qualname
from ..metadata import ABSENT, PARAMTYPES, MetadataStore, default_store
from .diagnostics import DIDiagnostics, DIEventType
from .errors import CyclicDependencyError, UnresolvableProviderError

logger = logging.getLogger("strix.di")

T = TypeVar("T")


class ResolveCtx:
    """
    Context for one top-level resolution.

    Tracks the in-progress stack for cycle detection and diagnostics.
    """
    __slots__ = ("stack",)

    def __init__(self):
        self.stack: List[type] = []

    def push(self, token: type) -> None:
        """Push token onto resolution stack."""
        self.stack.append(token)

    def pop(self) -> None:
        """Pop token from resolution stack."""
        self.stack.pop()

    def in_cycle(self, token: type) -> bool:
        """Check if token is currently being resolved (cycle)."""
        return token in self.stack

    def cycle_for(self, token: type) -> List[type]:
        """Path from the first occurrence of ``token`` back to itself."""
        start = self.stack.index(token)
        return self.stack[start:] + [token]


class Container:
    """
    DI Container - owns exactly one instance per registered class.

    Example:
        >>> container = Container(store, providers=[UserRepo, UserService])
        >>> service = container.resolve(UserService)
        >>> service is container.resolve(UserService)
        True
    """

    __slots__ = (
        "_store",
        "_providers",
        "_cache",
        "_plans",
        "_diagnostics",
    )

    def __init__(
        self,
        store: Optional[MetadataStore] = None,
        providers: Iterable[Any] = (),
        diagnostics: Optional[DIDiagnostics] = None,
    ):
        self._store = store if store is not None else default_store
        self._providers: Dict[type, None] = {}  # ordered set of registered classes
        self._cache: Dict[type, Any] = {}  # {class: instance}, in construction order
        self._plans: Dict[type, Tuple[type, ...]] = {}  # precomputed dependency lists
        self._diagnostics = diagnostics or DIDiagnostics()

        for provider in providers:
            self.register(provider)

    @property
    def store(self) -> MetadataStore:
        return self._store

    @property
    def diagnostics(self) -> DIDiagnostics:
        return self._diagnostics

    def register(self, cls: Any) -> None:
        """
        Register a class as constructible by this container.

        Registering the same class twice is a no-op.

        Raises:
            UnresolvableProviderError: If ``cls`` is not a class
        """
        if not inspect.isclass(cls):
            raise UnresolvableProviderError(cls, reason="only classes can be registered as providers")

        if cls in self._providers:
            return

        self._providers[cls] = None
        self._diagnostics.emit(DIEventType.REGISTRATION, token=cls)

    def is_registered(self, cls: Any) -> bool:
        try:
            return cls in self._providers
        except TypeError:
            return False

    def is_resolved(self, cls: Any) -> bool:
        try:
            return cls in self._cache
        except TypeError:
            return False

    @property
    def providers(self) -> List[type]:
        """Registered classes in registration order."""
        return list(self._providers)

    def instances(self) -> List[Tuple[type, Any]]:
        """``(class, instance)`` pairs in construction order."""
        return list(self._cache.items())

    def resolve(self, token: Type[T]) -> T:
        """
        Resolve ``token`` to its singleton instance, constructing it and
        its dependencies on first use.

        Raises:
            UnresolvableProviderError: If ``token`` or one of its
                dependencies has no registered provider
            CyclicDependencyError: If ``token`` transitively depends on itself
        """
        if self.is_resolved(token):
            return self._cache[token]

        return self._resolve(token, ResolveCtx(), requested_by=None)

    def _resolve(self, token: Any, ctx: ResolveCtx, requested_by: Any) -> Any:
        if self.is_resolved(token):
            return self._cache[token]

        if not self.is_registered(token):
            raise UnresolvableProviderError(
                token,
                requested_by=requested_by,
                candidates=self.providers,
            )

        if ctx.in_cycle(token):
            raise CyclicDependencyError(ctx.cycle_for(token))

        ctx.push(token)
        try:
            with self._diagnostics.measure(token):
                arguments = [
                    self._resolve(dependency, ctx, requested_by=token)
                    for dependency in self.dependencies_of(token)
                ]
                instance = token(*arguments)
        finally:
            ctx.pop()

        self._cache[token] = instance
        logger.debug("Constructed %s", qualname(token))
        return instance

    def dependencies_of(self, cls: type) -> Tuple[type, ...]:
        """
        Ordered dependency list for ``cls``.

        Raises:
            UnresolvableProviderError: If the constructor cannot be described
        """
        plan = self._plans.get(cls)
        if plan is None:
            declared = self._store.get(cls, PARAMTYPES)
            if declared is not ABSENT:
                plan = tuple(declared)
            else:
                plan = constructor_dependencies(cls)
            self._plans[cls] = plan
        return plan

    def __contains__(self, cls: Any) -> bool:
        return self.is_registered(cls)

    def __repr__(self) -> str:
        return f"Container(providers={len(self._providers)}, instances={len(self._cache)})"


def constructor_dependencies(cls: type) -> Tuple[type, ...]:
    """
    Extract dependency types from the ``__init__`` signature of ``cls``.

    Only required positional parameters are dependencies; the list ends at
    the first parameter that has a default. A class that declares no
    parameters has no dependencies.

    Raises:
        UnresolvableProviderError: For a required parameter without an
            annotation, a required keyword-only parameter, or an
            annotation that cannot be evaluated
    """
    init = cls.__init__
    if init is object.__init__:
        return ()

    try:
        sig = inspect.signature(init)
    except (TypeError, ValueError):
        # Builtins and C extensions without introspectable signatures
        return ()

    try:
        hints = get_type_hints(init)
    except NameError as exc:
        raise UnresolvableProviderError(cls, reason=f"unresolved annotation ({exc})") from exc

    dependencies = []
    defaults_reached = False
    parameters = list(sig.parameters.values())[1:]  # drop self
    for param in parameters:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        if param.kind is inspect.Parameter.KEYWORD_ONLY:
            if param.default is inspect.Parameter.empty:
                raise UnresolvableProviderError(
                    cls,
                    reason=f"keyword-only parameter '{param.name}' cannot be injected positionally",
                )
            continue

        if defaults_reached or param.default is not inspect.Parameter.empty:
            defaults_reached = True
            continue

        annotation = hints.get(param.name)
        if annotation is None:
            raise UnresolvableProviderError(
                cls,
                reason=f"missing type annotation for parameter '{param.name}'",
            )

        dependencies.append(annotation)

    return tuple(dependencies)
