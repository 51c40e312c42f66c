from __future__ import annotations

"""In-memory reference-rate table.

Holds ``currency -> rate`` relative to the current base currency, the as-of
date of the document it was built from, and the base itself.

Invariants:
    - the base currency is always present with rate exactly 1;
    - every rate is strictly positive;
    - the mapping is only ever replaced as a whole (initialize / rebase build a
      new dict and swap it in), so a failure leaves the previous state intact.

Not thread-safe: rebase reads the factor and then rewrites every entry.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, ItemsView, Iterable, Iterator, List, Optional

from fxref.core.exceptions import (
    AmbiguousAnchorError,
    DuplicateEntryError,
    UnknownCurrencyError,
)
from fxref.models.constants import ECB_ANCHOR, Currency
from fxref.models.rates import RateEntry

logger = logging.getLogger("fxref.rates.table")

ONE = Decimal(1)


class RateTable:
    def __init__(self, anchor_currency: Currency = ECB_ANCHOR):
        # Anchor-only state until a document is loaded
        self._rates: Dict[Currency, Decimal] = {anchor_currency: ONE}
        self._base: Currency = anchor_currency
        self._anchor: Currency = anchor_currency
        self._as_of: Optional[date] = None

    # Read accessors -------------------------------------------
    @property
    def base_currency(self) -> Currency:
        return self._base

    @property
    def anchor_currency(self) -> Currency:
        return self._anchor

    @property
    def as_of_date(self) -> Optional[date]:
        return self._as_of

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._rates

    def __len__(self) -> int:
        return len(self._rates)

    def __iter__(self) -> Iterator[Currency]:
        return iter(self._rates)

    def items(self) -> ItemsView[Currency, Decimal]:
        return self._rates.items()

    def snapshot(self) -> Dict[Currency, Decimal]:
        return dict(self._rates)

    def get_rate(self, symbol: Currency) -> Decimal:
        try:
            return self._rates[symbol]
        except KeyError:
            raise UnknownCurrencyError(symbol) from None

    def list_currencies(self, sorted: bool = False) -> List[Currency]:
        symbols = list(self._rates)
        if sorted:
            symbols.sort(key=lambda c: c.value)
        return symbols

    # Mutation -------------------------------------------------
    def initialize(
        self,
        entries: Iterable[RateEntry],
        as_of_date: date,
        anchor_currency: Currency = ECB_ANCHOR,
    ) -> None:
        """Replace the table with ``entries`` plus ``anchor_currency -> 1``.

        The anchor is appended after the document entries. The base currency
        resets to the anchor.
        """
        rates: Dict[Currency, Decimal] = {}
        for entry in entries:
            if entry.symbol in rates:
                raise DuplicateEntryError(entry.symbol)
            rates[entry.symbol] = entry.rate

        existing = rates.get(anchor_currency)
        if existing is not None and existing != ONE:
            raise AmbiguousAnchorError(anchor_currency, existing)
        rates[anchor_currency] = ONE

        self._rates = rates
        self._as_of = as_of_date
        self._anchor = anchor_currency
        self._base = anchor_currency

    def set_base_currency(self, new_base: Currency) -> None:
        if new_base == self._base:
            return
        factor = self.get_rate(new_base)
        rebased = {symbol: rate / factor for symbol, rate in self._rates.items()}
        self._rates = rebased
        logger.debug(
            "rebased rate table %s -> %s (factor %s)",
            self._base,
            new_base,
            factor,
            extra={"base_currency": new_base.value},
        )
        self._base = new_base
