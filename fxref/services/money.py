"""Rate display helpers.

Formatting is always driven by an explicit RateFormat; nothing here reads or
changes process-wide locale state. Decimal point is '.', no grouping.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP


@dataclass(frozen=True)
class RateFormat:
    places: int = 4
    width: int = 15  # column width used by the text rendering

    @property
    def quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.places)


DEFAULT_FORMAT = RateFormat()


def round_rate(value: Decimal, fmt: RateFormat = DEFAULT_FORMAT) -> Decimal:
    return Decimal(value).quantize(fmt.quantum, rounding=ROUND_HALF_UP)


def format_rate(value: Decimal, fmt: RateFormat = DEFAULT_FORMAT) -> str:
    return f"{round_rate(value, fmt):f}"


def to_decimal(value: "Decimal | int | float | str") -> Decimal:
    """Coerce an amount to Decimal; floats go through str() to keep their shortest repr."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)
