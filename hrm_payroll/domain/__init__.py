"""Domain layer definitions."""

from .rows import ExistingRow, GhostRow, PayrollRow

__all__ = [
    "ExistingRow",
    "GhostRow",
    "PayrollRow",
]
