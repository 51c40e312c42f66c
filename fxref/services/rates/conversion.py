from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from fxref.models.constants import Currency
from fxref.services.money import DEFAULT_FORMAT, RateFormat, format_rate, to_decimal
from .table import RateTable

"""Conversion, cross-rate and listing operations over a RateTable.

All functions are stateless; they read the table and never modify it. Results
are unrounded Decimals except for the display rows, which are formatted
according to an explicit RateFormat.
"""

SOURCE_TITLE = "Reference rates of European Central Bank"

_LIST_SEPARATORS = re.compile(r"[,;\s]+")


@dataclass(frozen=True)
class RateRow:
    currency: Currency
    rate: str


@dataclass(frozen=True)
class ConversionResult:
    amount: Decimal
    from_currency: Currency
    to_currency: Currency
    rate: Decimal
    result: Decimal


def exchange(
    table: RateTable,
    amount: Decimal | int | float | str,
    from_currency: Currency,
    to_currency: Optional[Currency] = None,
) -> Decimal:
    """Convert ``amount`` of ``from_currency`` into ``to_currency`` (base by default)."""
    target = to_currency if to_currency is not None else table.base_currency
    try:
        value = to_decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f"Invalid amount {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid amount {amount!r}")
    return value * table.get_rate(target) / table.get_rate(from_currency)


def cross_rate(
    table: RateTable, from_currency: Currency, to_currency: Optional[Currency] = None
) -> Decimal:
    target = to_currency if to_currency is not None else table.base_currency
    return table.get_rate(target) / table.get_rate(from_currency)


def convert(
    table: RateTable,
    amount: Decimal | int | float | str,
    from_currency: Currency,
    to_currency: Optional[Currency] = None,
) -> ConversionResult:
    """Like exchange(), but returns the rate used alongside the result."""
    target = to_currency if to_currency is not None else table.base_currency
    result = exchange(table, amount, from_currency, target)
    return ConversionResult(
        amount=to_decimal(amount),
        from_currency=from_currency,
        to_currency=target,
        rate=cross_rate(table, from_currency, target),
        result=result,
    )


def rates_table(
    table: RateTable,
    symbols: Optional[Iterable[Currency]] = None,
    fmt: RateFormat = DEFAULT_FORMAT,
) -> List[RateRow]:
    """Display rows for ``symbols`` in caller order, or every currency in table order.

    Fails on the first unknown symbol without returning partial rows.
    """
    wanted = table.list_currencies() if symbols is None else list(symbols)
    return [RateRow(currency=c, rate=format_rate(table.get_rate(c), fmt)) for c in wanted]


def render_table(table: RateTable, fmt: RateFormat = DEFAULT_FORMAT) -> str:
    lines = [
        SOURCE_TITLE,
        f"All rates are for 1 {table.base_currency.value}",
    ]
    if table.as_of_date is not None:
        lines.append(f"Rates as of {table.as_of_date.isoformat()}")
    lines.append("")
    for currency, rate in table.items():
        lines.append(f"{currency.value}{format_rate(rate, fmt):>{fmt.width}}")
    return "\n".join(lines) + "\n"


def parse_currency_list(text: str) -> List[Currency]:
    """Split ``"eur, bgn; usd,gbp CHF"`` style input into currencies, keeping order."""
    return [Currency.parse(tok) for tok in _LIST_SEPARATORS.split(text) if tok]
