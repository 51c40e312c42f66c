"""Domain models for the reference-rate table."""

from .constants import ECB_ANCHOR, Currency  # re-export
from .rates import RateDocument, RateEntry

__all__ = [
    "ECB_ANCHOR",
    "Currency",
    "RateDocument",
    "RateEntry",
]
