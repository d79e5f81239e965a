"""
Strix faults - structured error taxonomy.

Every framework error is a ``StrixError``: an exception carrying a stable
machine-readable code, a domain, and a severity. Bootstrap faults are all
fatal; there is no retry or recovery path.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class Severity(str, Enum):
    """Fault severity levels."""
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Functional area where a fault occurred.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.ANNOTATE = FaultDomain("annotate", "Decorator and metadata errors")
FaultDomain.MODULE = FaultDomain("module", "Module manifest errors")
FaultDomain.DI = FaultDomain("di", "Dependency injection errors")
FaultDomain.ROUTING = FaultDomain("routing", "Route compilation and lookup errors")
FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")


class StrixError(Exception):
    """
    Base class for all Strix errors.

    Subclasses declare ``code`` and ``domain`` as class attributes and pass
    only the message.

    Attributes:
        code: Stable identifier (e.g. ``"DEPENDENCY_CYCLE"``)
        message: Human-readable description
        domain: FaultDomain the error belongs to
        severity: Severity level, fatal unless overridden
        metadata: Additional structured context
    """

    code: str = "STRIX_ERROR"
    domain: FaultDomain = FaultDomain.DI
    severity: Severity = Severity.FATAL

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        domain: Optional[FaultDomain] = None,
        severity: Optional[Severity] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        if code is not None:
            self.code = code
        if domain is not None:
            self.domain = domain
        if severity is not None:
            self.severity = severity
        self.message = message
        self.metadata = metadata or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, "
            f"domain={self.domain.value}, severity={self.severity.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging or CLI JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "metadata": self.metadata,
        }


def qualname(obj: Any) -> str:
    """Readable name for a class, function, or arbitrary identifier."""
    name = getattr(obj, "__qualname__", None)
    if isinstance(name, str):
        return name
    return repr(obj)
