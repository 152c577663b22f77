from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

"""Pre-parse file validation: size limit first, then file type."""

__all__ = [
    "ValidationResult",
    "DEFAULT_MAX_FILE_SIZE_MB",
    "validate_file_size",
    "validate_file_type",
    "validate_file",
]

DEFAULT_MAX_FILE_SIZE_MB = 100
SUPPORTED_EXTENSIONS = (".csv", ".xls", ".xlsx")


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_file_size(path: Path, max_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB) -> ValidationResult:
    size = path.stat().st_size
    if size <= max_size_mb * 1024 * 1024:
        return ValidationResult(is_valid=True)
    size_mb = size / (1024 * 1024)
    return ValidationResult(
        is_valid=False,
        errors=[
            f"File size exceeds {max_size_mb}MB limit. Your file is {size_mb:.1f}MB. "
            "Please upload a smaller file."
        ],
    )


def validate_file_type(path: Path) -> ValidationResult:
    suffix = path.suffix.lower()
    if suffix in SUPPORTED_EXTENSIONS:
        return ValidationResult(is_valid=True)
    shown = suffix or "unknown"
    return ValidationResult(
        is_valid=False,
        errors=[
            f"Please upload a valid Excel (.xlsx, .xls) or CSV file. "
            f"File type '{shown}' is not supported."
        ],
    )


def validate_file(path: Path, max_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB) -> ValidationResult:
    if not path.is_file():
        return ValidationResult(is_valid=False, errors=[f"File not found: {path}"])
    size_result = validate_file_size(path, max_size_mb)
    if not size_result.is_valid:
        return size_result
    return validate_file_type(path)
