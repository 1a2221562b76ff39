"""
Error types raised by the storm impact pipeline.
"""

from __future__ import annotations


class StormImpactError(Exception):
    """Base class for every pipeline failure."""


class SourceReadError(StormImpactError, OSError):
    """The storm data source could not be opened, decompressed or read."""


class MalformedRowError(StormImpactError, ValueError):
    """A single source row could not be parsed. Skipped by the loader."""


class MappingFileError(StormImpactError, ValueError):
    """The event type mapping artifact is unreadable or inconsistent."""


class UnmappedCategoryError(StormImpactError, LookupError):
    """One or more normalized categories have no entry in the mapping."""

    def __init__(self, category: str, missing: list[str] | None = None):
        self.category = category
        self.missing = list(missing) if missing else [category]
        extra = len(self.missing) - 1
        msg = f"No event type mapping for category {category!r}"
        if extra > 0:
            msg += f" (and {extra} more)"
        super().__init__(msg)

    def __str__(self) -> str:
        return self.args[0]


class InvalidUnitError(StormImpactError, ValueError):
    """A damage unit suffix outside {B, M, K} reached the scaler."""
