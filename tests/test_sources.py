"""Document sources, HTTP helper and primary/backup resolution."""

from __future__ import annotations

import urllib.error
from pathlib import Path

import pytest

from fxref.core.config import BUNDLED_BACKUP
from fxref.core.exceptions import FormatError, SourceUnavailableError
from fxref.models.constants import Currency
from fxref.services import http_client
from fxref.services.rates import providers
from fxref.services.rates.providers import (
    FileDocumentSource,
    HttpDocumentSource,
    StaticDocumentSource,
    make_document_source,
)
from fxref.services.rates.resolver import resolve_rate_document

from .conftest import SCENARIO_XML, WIDER_XML, RecordingSource, UnavailableSource

BROKEN_XML = "<Cube><Cube time='2024-01-15'><Cube currency='USD' rate='n/a'/></Cube></Cube>"


# -- factory -------------------------------------------------------------------


@pytest.mark.parametrize(
    "location, cls",
    [
        ("https://www.ecb.europa.eu/stats/eurofxref/eurofxref-daily.xml", HttpDocumentSource),
        ("http://localhost:8000/rates.xml", HttpDocumentSource),
        ("file:///tmp/eurofxref-daily.xml", FileDocumentSource),
        ("eurofxref-daily.xml", FileDocumentSource),
        ("/var/data/eurofxref-daily.xml", FileDocumentSource),
    ],
)
def test_make_document_source_by_scheme(location, cls):
    assert isinstance(make_document_source(location), cls)


def test_make_document_source_file_url_path():
    source = make_document_source("file:///tmp/some%20dir/rates.xml")
    assert source.path == Path("/tmp/some dir/rates.xml")


def test_make_document_source_rejects_unknown_scheme():
    with pytest.raises(ValueError):
        make_document_source("ftp://example.com/rates.xml")


# -- concrete sources ----------------------------------------------------------


def test_file_source_reads_bytes(tmp_path: Path):
    path = tmp_path / "rates.xml"
    path.write_text(SCENARIO_XML, encoding="utf-8")
    assert FileDocumentSource(path).fetch() == SCENARIO_XML.encode("utf-8")


def test_file_source_missing_file(tmp_path: Path):
    with pytest.raises(SourceUnavailableError) as info:
        FileDocumentSource(tmp_path / "missing.xml").fetch()
    assert info.value.location.endswith("missing.xml")


def test_bundled_backup_is_readable():
    assert BUNDLED_BACKUP.exists()
    assert b"eurofxref" in FileDocumentSource(BUNDLED_BACKUP).fetch()


def test_http_source_wraps_http_errors(monkeypatch):
    def _fail(url, *, timeout, retries):
        raise http_client.HttpError(f"Failed to fetch {url}")

    monkeypatch.setattr(providers, "get_bytes", _fail)
    with pytest.raises(SourceUnavailableError) as info:
        HttpDocumentSource("https://example.invalid/rates.xml").fetch()
    assert info.value.location == "https://example.invalid/rates.xml"
    assert isinstance(info.value.__cause__, http_client.HttpError)


def test_http_source_passes_settings_through(monkeypatch):
    seen = {}

    def _ok(url, *, timeout, retries):
        seen.update(url=url, timeout=timeout, retries=retries)
        return b"<xml/>"

    monkeypatch.setattr(providers, "get_bytes", _ok)
    source = HttpDocumentSource("https://example.test/r.xml", timeout=1.5, retries=4)
    assert source.fetch() == b"<xml/>"
    assert seen == {"url": "https://example.test/r.xml", "timeout": 1.5, "retries": 4}


# -- http helper ---------------------------------------------------------------


class StubResponse:
    def __init__(self, body: bytes, status: int = 200) -> None:
        self._body = body
        self.status = status

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None


def test_get_bytes_retries_then_succeeds(monkeypatch):
    calls = []
    sleeps = []

    def _urlopen(request, timeout):
        calls.append(request.full_url)
        if len(calls) < 3:
            raise urllib.error.URLError("temporary failure")
        return StubResponse(b"payload")

    monkeypatch.setattr(http_client.urllib.request, "urlopen", _urlopen)
    monkeypatch.setattr(http_client.time, "sleep", sleeps.append)
    assert http_client.get_bytes("https://example.test/r.xml", retries=2) == b"payload"
    assert len(calls) == 3
    assert sleeps == [0.5, 1.0]


def test_get_bytes_gives_up_after_retries(monkeypatch):
    monkeypatch.setattr(
        http_client.urllib.request,
        "urlopen",
        lambda request, timeout: StubResponse(b"", status=503),
    )
    monkeypatch.setattr(http_client.time, "sleep", lambda s: None)
    with pytest.raises(http_client.HttpError) as info:
        http_client.get_bytes("https://example.test/r.xml", retries=1)
    assert "HTTP 503" in str(info.value)


# -- resolution ----------------------------------------------------------------


def test_primary_document_is_used_when_available():
    backup = RecordingSource(WIDER_XML, "backup")
    res = resolve_rate_document(StaticDocumentSource(SCENARIO_XML, "primary"), backup)
    assert res.location == "primary"
    assert res.used_backup is False
    assert res.primary_error is None
    assert backup.calls == 0
    assert res.document.symbols == (Currency.USD, Currency.GBP)


def test_unavailable_primary_falls_back_to_backup():
    res = resolve_rate_document(UnavailableSource("primary"), StaticDocumentSource(WIDER_XML, "backup"))
    assert res.used_backup is True
    assert res.location == "backup"
    assert isinstance(res.primary_error, SourceUnavailableError)
    assert Currency.CHF in res.document.symbols


def test_both_sources_unavailable():
    with pytest.raises(SourceUnavailableError) as info:
        resolve_rate_document(UnavailableSource("primary"), UnavailableSource("backup"))
    assert "primary" in info.value.location
    assert "backup" in info.value.location


def test_no_backup_reraises_primary_failure():
    with pytest.raises(SourceUnavailableError) as info:
        resolve_rate_document(UnavailableSource("primary"))
    assert info.value.location == "primary"


def test_malformed_primary_does_not_fall_back_by_default():
    backup = RecordingSource(WIDER_XML, "backup")
    with pytest.raises(FormatError):
        resolve_rate_document(StaticDocumentSource(BROKEN_XML, "primary"), backup)
    assert backup.calls == 0


def test_malformed_primary_falls_back_when_enabled():
    backup = RecordingSource(WIDER_XML, "backup")
    res = resolve_rate_document(
        StaticDocumentSource(BROKEN_XML, "primary"),
        backup,
        fallback_on_format_error=True,
    )
    assert res.used_backup is True
    assert isinstance(res.primary_error, FormatError)
    assert backup.calls == 1


def test_malformed_backup_is_format_error():
    with pytest.raises(FormatError):
        resolve_rate_document(UnavailableSource("primary"), StaticDocumentSource(BROKEN_XML, "backup"))
