from __future__ import annotations

import pytest

from fxref.core.config import Settings
from fxref.core.exceptions import SourceUnavailableError
from fxref.services.rate_service import CurrencyConverter
from fxref.services.rates.base import DocumentSource
from fxref.services.rates.providers import StaticDocumentSource

SCENARIO_XML = """<?xml version="1.0" encoding="UTF-8"?>
<gesmes:Envelope xmlns:gesmes="http://www.gesmes.org/xml/2002-08-01"
                 xmlns="http://www.ecb.int/vocabulary/2002-08-01/eurofxref">
  <gesmes:subject>Reference rates</gesmes:subject>
  <Cube>
    <Cube time="2024-01-15">
      <Cube currency="USD" rate="1.0950"/>
      <Cube currency="GBP" rate="0.8590"/>
    </Cube>
  </Cube>
</gesmes:Envelope>
"""

WIDER_XML = """<Envelope>
  <Cube>
    <Cube time="2024-01-15">
      <Cube currency="USD" rate="1.0950"/>
      <Cube currency="JPY" rate="160.25"/>
      <Cube currency="BGN" rate="1.9558"/>
      <Cube currency="GBP" rate="0.8590"/>
      <Cube currency="CHF" rate="0.9354"/>
    </Cube>
  </Cube>
</Envelope>
"""


class UnavailableSource(DocumentSource):
    def __init__(self, location: str = "unreachable"):
        self.location = location
        self.calls = 0

    def fetch(self) -> bytes:
        self.calls += 1
        raise SourceUnavailableError(self.location, "connection refused")


class RecordingSource(StaticDocumentSource):
    def __init__(self, content, location="recording"):
        super().__init__(content, location)
        self.calls = 0

    def fetch(self) -> bytes:
        self.calls += 1
        return super().fetch()


@pytest.fixture
def scenario_xml() -> str:
    return SCENARIO_XML


@pytest.fixture
def make_converter():
    def _make(xml: str = SCENARIO_XML, backup: DocumentSource | None = None, **settings_kw):
        conv = CurrencyConverter(
            Settings(**settings_kw),
            primary=StaticDocumentSource(xml, "primary"),
            backup=backup or UnavailableSource("backup"),
        )
        return conv

    return _make


@pytest.fixture
def converter(make_converter) -> CurrencyConverter:
    return make_converter()
