from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from fxref.models.constants import Currency
from fxref.services.rate_service import CurrencyConverter, get_converter
from fxref.services.rates.conversion import parse_currency_list

"""Rates router exposing the converter over HTTP.

Endpoints:
    - GET /rates                 -> rate rows (all, or ?symbols=eur,usd;gbp)
    - GET /rates/text            -> plain-text table
    - GET /rates/currencies      -> known currency codes (?sorted=true)
    - GET /rates/exchange        -> convert an amount (?amount=&from=&to=)
    - GET /rates/cross           -> cross rate (?from=&to=)
    - GET /rates/base, PUT /rates/base -> read / change the base currency

Currency parameters are plain strings parsed case-insensitively, so an unknown
code surfaces as a 404 unknown_currency rather than a 422.
"""

router = APIRouter(prefix="/rates", tags=["rates"])


def get_rate_converter() -> CurrencyConverter:
    return get_converter()


class RateRowOut(BaseModel):
    currency: Currency
    rate: str


class RatesTableOut(BaseModel):
    base_currency: Currency
    as_of: Optional[date]
    source: str
    rates: List[RateRowOut]


class ConversionOut(BaseModel):
    amount: Decimal
    from_currency: Currency
    to_currency: Currency
    rate: Decimal
    result: Decimal


class CrossRateOut(BaseModel):
    from_currency: Currency
    to_currency: Currency
    rate: Decimal


class BaseCurrencyIn(BaseModel):
    currency: str = Field(..., min_length=3, max_length=3, description="Three-letter code, e.g. USD")


class BaseCurrencyOut(BaseModel):
    base_currency: Currency
    as_of: Optional[date]


def _optional_currency(value: Optional[str]) -> Optional[Currency]:
    return Currency.parse(value) if value else None


@router.get("", response_model=RatesTableOut, summary="Rates table for the base currency")
async def list_rates(
    symbols: Optional[str] = Query(
        None, description="Comma, semicolon or space separated codes; all when omitted"
    ),
    conv: CurrencyConverter = Depends(get_rate_converter),
):
    wanted = parse_currency_list(symbols) if symbols else None
    rows = conv.rates_table(wanted)
    return RatesTableOut(
        base_currency=conv.base_currency,
        as_of=conv.as_of_date,
        source=conv.source_location,
        rates=[RateRowOut(currency=r.currency, rate=r.rate) for r in rows],
    )


@router.get("/text", response_class=PlainTextResponse, summary="Rates table as text")
async def rates_text(conv: CurrencyConverter = Depends(get_rate_converter)):
    return conv.render()


@router.get("/currencies", summary="List known currencies")
async def list_currencies(
    sorted: bool = Query(False, description="Sort codes alphabetically"),
    conv: CurrencyConverter = Depends(get_rate_converter),
):
    return {"currencies": [c.value for c in conv.list_currencies(sorted=sorted)]}


@router.get("/exchange", response_model=ConversionOut, summary="Convert an amount")
async def exchange(
    amount: Decimal = Query(..., description="Amount in the source currency"),
    from_currency: str = Query(..., alias="from"),
    to_currency: Optional[str] = Query(None, alias="to", description="Base currency when omitted"),
    conv: CurrencyConverter = Depends(get_rate_converter),
):
    res = conv.convert(amount, Currency.parse(from_currency), _optional_currency(to_currency))
    return ConversionOut(
        amount=res.amount,
        from_currency=res.from_currency,
        to_currency=res.to_currency,
        rate=res.rate,
        result=res.result,
    )


@router.get("/cross", response_model=CrossRateOut, summary="Cross rate between two currencies")
async def cross(
    from_currency: str = Query(..., alias="from"),
    to_currency: Optional[str] = Query(None, alias="to", description="Base currency when omitted"),
    conv: CurrencyConverter = Depends(get_rate_converter),
):
    src = Currency.parse(from_currency)
    dst = _optional_currency(to_currency) or conv.base_currency
    return CrossRateOut(from_currency=src, to_currency=dst, rate=conv.cross_rate(src, dst))


@router.get("/base", response_model=BaseCurrencyOut, summary="Current base currency")
async def get_base(conv: CurrencyConverter = Depends(get_rate_converter)):
    return BaseCurrencyOut(base_currency=conv.base_currency, as_of=conv.as_of_date)


@router.put("/base", response_model=BaseCurrencyOut, summary="Rebase the rates table")
async def set_base(
    payload: BaseCurrencyIn,
    conv: CurrencyConverter = Depends(get_rate_converter),
):
    conv.base_currency = Currency.parse(payload.currency)
    return BaseCurrencyOut(base_currency=conv.base_currency, as_of=conv.as_of_date)
