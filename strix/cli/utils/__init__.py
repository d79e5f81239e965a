"""Terminal output helpers for the Strix CLI."""

from .colors import (
    success, error, warning, info, dim, bold,
    banner, section, kv, table,
)

__all__ = [
    "success", "error", "warning", "info", "dim", "bold",
    "banner", "section", "kv", "table",
]
