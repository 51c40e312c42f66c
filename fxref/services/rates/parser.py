from __future__ import annotations

"""Parser for the ECB daily reference-rate XML.

The document is a tree of ``Cube`` elements::

    <gesmes:Envelope ...>
      <Cube>
        <Cube time="2024-01-15">
          <Cube currency="USD" rate="1.0950"/>
          ...

Nesting depth and namespaces are not significant: any element whose local name
is ``Cube`` is inspected, and its attributes decide what it means. Attribute
content is validated strictly; the first bad value aborts the parse.
"""
import logging
import re
import xml.etree.ElementTree as ET
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from fxref.core.exceptions import FormatError
from fxref.models.constants import Currency
from fxref.models.rates import RateDocument, RateEntry

logger = logging.getLogger("fxref.rates.parser")

QUOTE_ELEMENT = "Cube"
TIME_ATTR = "time"
CURRENCY_ATTR = "currency"
RATE_ATTR = "rate"
DATE_FORMAT = "%Y-%m-%d"
# Plain decimal notation only: no digit grouping, no NaN/Infinity spellings
RATE_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_date(raw: str) -> date:
    try:
        return datetime.strptime(raw.strip(), DATE_FORMAT).date()
    except (ValueError, AttributeError) as e:
        raise FormatError(TIME_ATTR, raw) from e


def parse_currency(raw: str) -> Currency:
    # Document codes must match exactly; no case folding here
    try:
        return Currency(raw)
    except ValueError:
        raise FormatError(CURRENCY_ATTR, raw) from None


def parse_rate(raw: str) -> Decimal:
    text = raw.strip()
    if not RATE_PATTERN.fullmatch(text):
        raise FormatError(RATE_ATTR, raw)
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise FormatError(RATE_ATTR, raw) from e
    if not value.is_finite() or value <= 0:
        raise FormatError(RATE_ATTR, raw, "rate must be a positive number")
    return value


def parse_rate_document(content: bytes | str, location: str = "<memory>") -> RateDocument:
    """Parse a rate document into validated entries plus its as-of date.

    Raises FormatError on malformed XML, a bad ``time``, an unknown currency code,
    a non-numeric rate, a quotation missing one of its two attributes, or a
    document without any ``time`` attribute. Repeated symbols are passed through;
    the rate table rejects them.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise FormatError("document", location, str(e)) from e

    as_of: Optional[date] = None
    quotes: List[Tuple[Currency, Decimal]] = []

    for elem in root.iter():
        if not isinstance(elem.tag, str) or _local_name(elem.tag) != QUOTE_ELEMENT:
            continue
        attrs = elem.attrib
        if TIME_ATTR in attrs:
            parsed = parse_date(attrs[TIME_ATTR])
            if as_of is not None and parsed != as_of:
                raise FormatError(
                    TIME_ATTR,
                    attrs[TIME_ATTR],
                    f"document already dated {as_of.isoformat()}",
                )
            as_of = parsed
        if CURRENCY_ATTR in attrs or RATE_ATTR in attrs:
            if CURRENCY_ATTR not in attrs:
                raise FormatError(CURRENCY_ATTR, None, f"rate {attrs[RATE_ATTR]!r} has no currency")
            if RATE_ATTR not in attrs:
                raise FormatError(RATE_ATTR, None, f"currency {attrs[CURRENCY_ATTR]!r} has no rate")
            quotes.append((parse_currency(attrs[CURRENCY_ATTR]), parse_rate(attrs[RATE_ATTR])))

    if as_of is None:
        raise FormatError(TIME_ATTR, None, f"no reference date in {location}")

    entries = tuple(RateEntry(symbol=sym, rate=rate, as_of=as_of) for sym, rate in quotes)
    logger.debug(
        "parsed rate document",
        extra={"location": location, "as_of": as_of.isoformat(), "entries": len(entries)},
    )
    return RateDocument(as_of=as_of, entries=entries, location=location)
