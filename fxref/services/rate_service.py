"""Currency converter built on the ECB daily reference rates.

Construction resolves the rate document (primary URL, then the bundled
backup), parses it and anchors the table at EUR = 1. Construction either
yields a fully populated table or raises; there is no empty-table state.

Design:
- Base currency: EUR unless settings.base_currency says otherwise.
- Setting ``base_currency`` rebases the table in place; nothing is re-fetched.
- Formatting goes through an explicit RateFormat built from settings.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from decimal import Decimal
from functools import lru_cache
from typing import Iterable, List, Optional

from fxref.core.config import Settings, get_settings
from fxref.models.constants import Currency
from fxref.services.money import RateFormat
from fxref.services.rates import conversion
from fxref.services.rates.base import DocumentSource
from fxref.services.rates.providers import make_document_source
from fxref.services.rates.resolver import resolve_rate_document
from fxref.services.rates.table import RateTable

logger = logging.getLogger("fxref.rates")


class CurrencyConverter:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        primary: Optional[DocumentSource] = None,
        backup: Optional[DocumentSource] = None,
    ):
        self._settings = settings or get_settings()
        s = self._settings
        if primary is None:
            primary = make_document_source(
                s.source_url, timeout=s.http_timeout_seconds, retries=s.http_retries
            )
        if backup is None:
            backup = make_document_source(
                s.backup_source_path, timeout=s.http_timeout_seconds, retries=s.http_retries
            )
        self.format = RateFormat(places=s.rate_display_places)

        resolution = resolve_rate_document(
            primary, backup, fallback_on_format_error=s.fallback_on_format_error
        )
        table = RateTable(s.anchor_currency)
        table.initialize(
            resolution.document.entries, resolution.document.as_of, s.anchor_currency
        )
        if s.base_currency != s.anchor_currency:
            table.set_base_currency(s.base_currency)

        self._table = table
        self.source_location = resolution.location
        self.used_backup = resolution.used_backup
        logger.info(
            "rate table ready",
            extra={
                "location": resolution.location,
                "as_of": table.as_of_date.isoformat() if table.as_of_date else None,
                "entries": len(table),
                "base_currency": table.base_currency.value,
                "used_backup": resolution.used_backup,
            },
        )

    @property
    def table(self) -> RateTable:
        return self._table

    @property
    def as_of_date(self) -> Optional[date]:
        return self._table.as_of_date

    @property
    def base_currency(self) -> Currency:
        return self._table.base_currency

    @base_currency.setter
    def base_currency(self, value: Currency | str) -> None:
        self._table.set_base_currency(Currency.parse(value))

    def get_rate(self, currency: Currency) -> Decimal:
        return self._table.get_rate(currency)

    def exchange(
        self,
        amount: Decimal | int | float | str,
        from_currency: Currency,
        to_currency: Optional[Currency] = None,
    ) -> Decimal:
        return conversion.exchange(self._table, amount, from_currency, to_currency)

    def convert(
        self,
        amount: Decimal | int | float | str,
        from_currency: Currency,
        to_currency: Optional[Currency] = None,
    ) -> conversion.ConversionResult:
        return conversion.convert(self._table, amount, from_currency, to_currency)

    def cross_rate(
        self, from_currency: Currency, to_currency: Optional[Currency] = None
    ) -> Decimal:
        return conversion.cross_rate(self._table, from_currency, to_currency)

    def rates_table(
        self,
        symbols: Optional[Iterable[Currency]] = None,
        fmt: Optional[RateFormat] = None,
    ) -> List[conversion.RateRow]:
        return conversion.rates_table(self._table, symbols, fmt or self.format)

    def list_currencies(self, sorted: bool = False) -> List[Currency]:
        return self._table.list_currencies(sorted=sorted)

    def render(self, fmt: Optional[RateFormat] = None) -> str:
        return conversion.render_table(self._table, fmt or self.format)

    def __str__(self) -> str:
        return self.render()


_converter_lock = threading.Lock()


# Singleton dependency helper used by FastAPI DI. Sync dependencies run in the
# threadpool, so the first build is serialised to keep a single instance.
def get_converter() -> CurrencyConverter:
    with _converter_lock:
        return _get_converter_unlocked()


@lru_cache
def _get_converter_unlocked() -> CurrencyConverter:
    return CurrencyConverter()
