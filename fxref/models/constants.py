"""Domain constants for validation.

The currency set is closed: it mirrors the codes the ECB has published in its
daily reference file, including legacy currencies replaced by the euro.
"""

from __future__ import annotations

from enum import Enum

from fxref.core.exceptions import UnknownCurrencyError


class Currency(str, Enum):
    USD = "USD"
    JPY = "JPY"
    BGN = "BGN"
    CYP = "CYP"
    CZK = "CZK"
    DKK = "DKK"
    EEK = "EEK"
    GBP = "GBP"
    HUF = "HUF"
    LTL = "LTL"
    LVL = "LVL"
    MTL = "MTL"
    PLN = "PLN"
    ROL = "ROL"
    RON = "RON"
    SEK = "SEK"
    SIT = "SIT"
    SKK = "SKK"
    CHF = "CHF"
    ISK = "ISK"
    NOK = "NOK"
    HRK = "HRK"
    RUB = "RUB"
    TRL = "TRL"
    TRY = "TRY"
    AUD = "AUD"
    BRL = "BRL"
    CAD = "CAD"
    CNY = "CNY"
    HKD = "HKD"
    IDR = "IDR"
    ILS = "ILS"
    INR = "INR"
    KRW = "KRW"
    MXN = "MXN"
    MYR = "MYR"
    NZD = "NZD"
    PHP = "PHP"
    SGD = "SGD"
    THB = "THB"
    ZAR = "ZAR"
    EUR = "EUR"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: "str | Currency") -> "Currency":
        """Lenient lookup for user input (case and surrounding blanks ignored)."""
        if isinstance(text, cls):
            return text
        try:
            return cls(str(text).strip().upper())
        except ValueError:
            raise UnknownCurrencyError(str(text).strip()) from None


# Anchor of the ECB file: every published rate is "units of X per 1 EUR".
ECB_ANCHOR = Currency.EUR
