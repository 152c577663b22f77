from __future__ import annotations

import re
from collections.abc import Sequence

from ..models.column_mapping import AliasTable, ColumnMapping, TargetColumnType

"""Fuzzy header classification.

Headers are compared after removing whitespace, underscores and dashes and
lowercasing, so "First Name", "first_name", "FIRST-NAME" and "FirstName" all
land on the same alias. The alias table is an explicit, immutable input of
ColumnMatcher; DEFAULT_ALIASES is the fixed set shipped with the tool.
"""

__all__ = [
    "NO_TARGETS_MESSAGE",
    "NoTargetColumnsError",
    "normalize_column_name",
    "DEFAULT_ALIASES",
    "ColumnMatcher",
    "classify_columns",
    "has_target_columns",
    "target_mappings",
]

_SEPARATORS = re.compile(r"[\s_-]+")

NO_TARGETS_MESSAGE = (
    "No target columns found. File must contain First Name, Last Name, Mobile, Phone, "
    "or Email (or variations like FirstName, E-mail, Phone Number, etc.)"
)


class NoTargetColumnsError(Exception):
    """Raised when a header list contains no target column at all."""

    def __init__(self, mappings: Sequence[ColumnMapping], message: str = NO_TARGETS_MESSAGE) -> None:
        super().__init__(message)
        self.mappings = list(mappings)
        self.headers = [m.original_name for m in mappings]


def normalize_column_name(name: str) -> str:
    """Normalize a header for fuzzy matching.

    >>> normalize_column_name("First Name")
    'firstname'
    >>> normalize_column_name(" E-mail_Address ")
    'emailaddress'
    """
    return _SEPARATORS.sub("", name.lower())


DEFAULT_ALIASES = AliasTable.from_surface_forms(
    {
        TargetColumnType.FIRST_NAME: ("firstname", "fname"),
        TargetColumnType.LAST_NAME: ("lastname", "lname"),
        TargetColumnType.EMAIL: ("email", "emailaddress", "e-mail"),
        TargetColumnType.MOBILE: ("mobile", "mobilenumber"),
        TargetColumnType.PHONE: ("phone", "phonenumber"),
    },
    normalize_column_name,
)


class ColumnMatcher:
    """Classifies headers against an alias table."""

    def __init__(self, aliases: AliasTable = DEFAULT_ALIASES) -> None:
        self.aliases = aliases

    def classify(self, headers: Sequence[str]) -> list[ColumnMapping]:
        """Classify every header, preserving input order and index.

        Duplicate headers are classified independently; two columns that both
        resolve to the same target type are both targets.
        """
        mappings: list[ColumnMapping] = []
        for index, header in enumerate(headers):
            normalized = normalize_column_name(header)
            target_type = self.aliases.lookup(normalized)
            mappings.append(
                ColumnMapping(
                    original_name=header,
                    normalized_name=normalized,
                    is_target=target_type is not None,
                    target_type=target_type,
                    column_index=index,
                )
            )
        return mappings

    def has_target(self, headers: Sequence[str]) -> bool:
        return any(m.is_target for m in self.classify(headers))

    def require_targets(self, headers: Sequence[str]) -> list[ColumnMapping]:
        """Classify headers, raising NoTargetColumnsError if none is a target."""
        mappings = self.classify(headers)
        if not any(m.is_target for m in mappings):
            raise NoTargetColumnsError(mappings)
        return mappings


def target_mappings(mappings: Sequence[ColumnMapping]) -> list[ColumnMapping]:
    return [m for m in mappings if m.is_target]


def classify_columns(headers: Sequence[str]) -> list[ColumnMapping]:
    return ColumnMatcher().classify(headers)


def has_target_columns(headers: Sequence[str]) -> bool:
    return ColumnMatcher().has_target(headers)
