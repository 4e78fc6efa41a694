"""Entry validation package."""

from gharkhata.validation.validator import (
    EntryRejectedError,
    EntryValidator,
    ensure_valid,
    is_month_key,
    parse_date_key,
)

__all__ = [
    "EntryRejectedError",
    "EntryValidator",
    "ensure_valid",
    "is_month_key",
    "parse_date_key",
]
