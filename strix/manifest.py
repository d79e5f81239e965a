"""
ModuleManifest - the declarative list of providers and controllers a
module wires together. Pure data, no import-time side effects.
"""

from typing import Any, Optional, Tuple
from dataclasses import dataclass, field
import hashlib
import json

from .faults import FaultDomain, StrixError, qualname
from .metadata import ABSENT, MODULE_METADATA, MetadataStore


class ManifestError(StrixError):
    """Module manifest is missing or malformed."""

    code = "MANIFEST_INVALID"
    domain = FaultDomain.MODULE


@dataclass(frozen=True)
class ModuleManifest:
    """
    Providers and controllers declared by a module.

    Order is significant: bootstrap resolves providers and scans
    controllers in exactly the order given here.
    """

    providers: Tuple[Any, ...] = field(default_factory=tuple)
    controllers: Tuple[Any, ...] = field(default_factory=tuple)
    name: str = ""

    def __post_init__(self):
        for attr in ("providers", "controllers"):
            value = getattr(self, attr)
            if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
                raise ManifestError(
                    f"Manifest '{self.name or '<anonymous>'}': {attr} must be a "
                    f"list of classes, got {type(value).__name__}"
                )
            object.__setattr__(self, attr, tuple(value))

    def to_dict(self) -> dict:
        """Serialize manifest to dictionary (for fingerprinting and the CLI)."""
        return {
            "name": self.name,
            "providers": [_import_path(p) for p in self.providers],
            "controllers": [_import_path(c) for c in self.controllers],
        }

    def fingerprint(self) -> str:
        """Stable hash of the manifest contents."""
        data = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_manifest(store: MetadataStore, module: Any) -> ModuleManifest:
    """
    Read the manifest attached to ``module``.

    Raises:
        ManifestError: If ``module`` was never declared as a module
    """
    manifest = store.get(module, MODULE_METADATA)
    if manifest is ABSENT:
        raise ManifestError(
            f"{qualname(module)} has no module manifest; "
            f"decorate it with @Module(providers=[...], controllers=[...])"
        )
    if not isinstance(manifest, ModuleManifest):
        raise ManifestError(
            f"{qualname(module)} carries a {type(manifest).__name__} "
            f"under '{MODULE_METADATA}', expected ModuleManifest"
        )
    return manifest


def _import_path(obj: Any) -> str:
    module = getattr(obj, "__module__", None)
    if module is None:
        return qualname(obj)
    return f"{module}:{qualname(obj)}"
