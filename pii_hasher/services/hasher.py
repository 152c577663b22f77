from __future__ import annotations

import hashlib

"""Value normalization and SHA-256 hashing.

Values are trimmed and lowercased before hashing so that "JOHN", "john" and
"  John  " produce the same digest, matching the normalization expected by
ad platforms' customer-match uploads. Blank values are never hashed.
"""

__all__ = [
    "normalize_value",
    "digest",
    "hash_cell",
]


def normalize_value(raw: str) -> str | None:
    """Trim and lowercase ``raw``; return None when nothing is left."""
    trimmed = raw.strip()
    if not trimmed:
        return None
    # str.lower() is locale independent
    return trimmed.lower()


def digest(normalized: str) -> str:
    """SHA-256 of the UTF-8 encoding, as 64 lowercase hex characters."""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def hash_cell(raw: str) -> str | None:
    normalized = normalize_value(raw)
    if normalized is None:
        return None
    return digest(normalized)
