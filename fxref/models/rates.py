from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from .constants import Currency


class RateEntry(BaseModel):
    """One quotation: units of ``symbol`` per 1 unit of the document anchor."""

    model_config = ConfigDict(frozen=True)

    symbol: Currency
    rate: Decimal = Field(..., gt=0)
    as_of: date


@dataclass(frozen=True)
class RateDocument:
    as_of: date
    entries: Tuple[RateEntry, ...] = field(default_factory=tuple)
    location: str = "<memory>"

    @property
    def symbols(self) -> Tuple[Currency, ...]:
        return tuple(e.symbol for e in self.entries)
