"""Exception taxonomy for rate loading and querying.

Parse-time errors (FormatError, DuplicateEntryError, AmbiguousAnchorError,
SourceUnavailableError) abort converter construction. UnknownCurrencyError is
raised per query and never alters the table.
"""

from __future__ import annotations

from typing import Any


class RateError(Exception):
    pass


class SourceUnavailableError(RateError):
    """A rate document could not be retrieved."""

    def __init__(self, location: str, reason: Any = None):
        self.location = location
        self.reason = reason
        msg = f"Rate source unavailable: {location}"
        if reason is not None:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class FormatError(RateError, ValueError):
    """A field of the rate document has an unrecognised format."""

    def __init__(self, field: str, value: Any, detail: str | None = None):
        self.field = field
        self.value = value
        msg = f"Unrecognised format in {field}! {value!r}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class UnknownCurrencyError(RateError, LookupError):
    def __init__(self, symbol: Any):
        self.symbol = str(symbol)
        super().__init__(f"Currency {self.symbol} is not in the rates table")


class DuplicateEntryError(RateError):
    def __init__(self, symbol: Any):
        self.symbol = str(symbol)
        super().__init__(f"Duplicate rate entry for {self.symbol}")


class AmbiguousAnchorError(RateError):
    def __init__(self, symbol: Any, rate: Any):
        self.symbol = str(symbol)
        self.rate = rate
        super().__init__(
            f"Anchor currency {self.symbol} already quoted with rate {rate}, expected 1"
        )


__all__ = [
    "RateError",
    "SourceUnavailableError",
    "FormatError",
    "UnknownCurrencyError",
    "DuplicateEntryError",
    "AmbiguousAnchorError",
]
