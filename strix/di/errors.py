"""
DI-specific error types with rich diagnostics.
"""

from typing import Any, List, Optional, Sequence

from ..faults import FaultDomain, StrixError, qualname


class DIError(StrixError):
    """Base exception for DI errors."""

    code = "DI_ERROR"
    domain = FaultDomain.DI


class UnresolvableProviderError(DIError):
    """No constructor is known for the requested identifier."""

    code = "PROVIDER_NOT_FOUND"

    def __init__(
        self,
        token: Any,
        *,
        requested_by: Any = None,
        reason: Optional[str] = None,
        candidates: Optional[Sequence[Any]] = None,
    ):
        self.token = token
        self.requested_by = requested_by
        self.reason = reason
        self.candidates = list(candidates or [])

        msg = f"No provider registered for {qualname(token)}"
        if reason:
            msg = f"Cannot resolve {qualname(token)}: {reason}"

        if requested_by is not None:
            msg += f"\nRequested by: {qualname(requested_by)}"

        if self.candidates:
            msg += "\n\nRegistered providers:"
            for candidate in self.candidates:
                msg += f"\n  - {qualname(candidate)}"

        msg += "\n\nSuggested fixes:"
        if reason:
            msg += f"\n  - Annotate the constructor of {qualname(token)} with provider types"
            msg += "\n  - Declare the dependency list explicitly with depends_on=[...]"
        else:
            msg += f"\n  - Add {qualname(token)} to the module's providers list"
            msg += "\n  - Check that the constructor annotation names the intended class"

        super().__init__(
            msg,
            metadata={
                "token": qualname(token),
                "requested_by": qualname(requested_by) if requested_by is not None else None,
            },
        )


class CyclicDependencyError(DIError):
    """The dependency graph contains a cycle."""

    code = "DEPENDENCY_CYCLE"

    def __init__(self, cycle: List[Any]):
        self.cycle = list(cycle)

        names = [qualname(token) for token in self.cycle]
        msg = "Detected dependency cycle:\n  " + " -> ".join(names)
        msg += "\n\nSuggested fixes:"
        msg += "\n  - Extract the shared behaviour into a separate provider"
        msg += "\n  - Restructure dependencies to remove the cycle"

        super().__init__(msg, metadata={"cycle": names})
