from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

"""Column classification models for the PII column hasher.

Defines the fixed set of target (PII) column families, the immutable alias
table used to recognize them, and the per-header ColumnMapping produced by
the column matcher.
"""

__all__ = [
    "TargetColumnType",
    "ColumnMapping",
    "AliasTable",
]


class TargetColumnType(Enum):
    """Closed set of PII column families eligible for hashing."""
    FIRST_NAME = "FIRST_NAME"
    LAST_NAME = "LAST_NAME"
    MOBILE = "MOBILE"
    EMAIL = "EMAIL"
    PHONE = "PHONE"


@dataclass(frozen=True)
class ColumnMapping:
    """Classification result for a single header.

    Computed once per uploaded table and never modified afterwards.
    """
    original_name: str  # Header text as found in the source file
    normalized_name: str  # Header with whitespace/underscores/dashes removed, lowercased
    is_target: bool  # True iff normalized_name is a known alias
    target_type: TargetColumnType | None  # None for non-target columns
    column_index: int  # Position of original_name in the header list (0-based)


@dataclass(frozen=True)
class AliasTable:
    """Immutable lookup from normalized header names to target column types.

    Build it with ``from_surface_forms`` so every alias goes through the same
    header normalization as the headers being classified.
    """
    entries: Mapping[str, TargetColumnType] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the mapping even if a plain dict was supplied
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @classmethod
    def from_surface_forms(
        cls,
        forms: Mapping[TargetColumnType, Iterable[str]],
        normalize: Callable[[str], str],
    ) -> AliasTable:
        entries: dict[str, TargetColumnType] = {}
        for target_type, aliases in forms.items():
            for alias in aliases:
                key = normalize(alias)
                if key:  # empty keys can never match
                    entries[key] = target_type
        return cls(entries=entries)

    def lookup(self, normalized_name: str) -> TargetColumnType | None:
        if not normalized_name:
            return None
        return self.entries.get(normalized_name)
