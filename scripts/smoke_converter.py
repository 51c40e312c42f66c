"""Smoke script for the currency converter.

Demonstrates:
 1. Construction (ECB download, or the bundled backup when offline).
 2. Rebasing to BGN and printing the text table.
 3. Exchange, cross rate and a selected rates table.

NOTE: This is a lightweight diagnostic and not a formal test.
"""

from decimal import Decimal
from pprint import pprint

from fxref.core.config import get_settings
from fxref.core.logging import init_logging
from fxref.models.constants import Currency
from fxref.services.rate_service import CurrencyConverter
from fxref.services.rates.conversion import parse_currency_list


def run():
    init_logging(debug=get_settings().debug)
    conv = CurrencyConverter()
    conv.base_currency = Currency.BGN

    print(conv)
    out = {
        "source": conv.source_location,
        "used_backup": conv.used_backup,
        "currencies": [c.value for c in conv.list_currencies()],
        "exchange(5, EUR, USD)": str(conv.exchange(Decimal(5), Currency.EUR, Currency.USD)),
        "cross_rate(EUR)": str(conv.cross_rate(Currency.EUR)),
        "rates_table": [
            (r.currency.value, r.rate)
            for r in conv.rates_table(parse_currency_list("eur, bgn; usd,gbp CHF  "))
        ],
    }
    pprint(out)


if __name__ == "__main__":
    run()
