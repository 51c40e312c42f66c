from __future__ import annotations

"""Concrete document sources and factory.

'http'/'https' locations go through the retrying HTTP helper; 'file' URLs and
plain paths are read from disk. The bundled backup document lives in
fxref/data.
"""
from pathlib import Path
from typing import Dict, Type
from urllib.parse import unquote, urlparse

from fxref.core.exceptions import SourceUnavailableError
from fxref.services.http_client import HttpError, get_bytes
from .base import DocumentSource


class HttpDocumentSource(DocumentSource):
    def __init__(self, url: str, *, timeout: float = 5.0, retries: int = 2):
        self.location = url
        self._timeout = timeout
        self._retries = retries

    def fetch(self) -> bytes:  # type: ignore[override]
        try:
            return get_bytes(self.location, timeout=self._timeout, retries=self._retries)
        except HttpError as e:
            raise SourceUnavailableError(self.location, e) from e


class FileDocumentSource(DocumentSource):
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.location = str(self.path)

    def fetch(self) -> bytes:  # type: ignore[override]
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise SourceUnavailableError(self.location, e) from e


class StaticDocumentSource(DocumentSource):
    """In-memory document, handy for embedding and tests."""

    def __init__(self, content: bytes | str, location: str = "<memory>"):
        self._content = content.encode("utf-8") if isinstance(content, str) else content
        self.location = location

    def fetch(self) -> bytes:  # type: ignore[override]
        return self._content


_SOURCE_REGISTRY: Dict[str, Type[DocumentSource]] = {
    "http": HttpDocumentSource,
    "https": HttpDocumentSource,
    "file": FileDocumentSource,
    "": FileDocumentSource,
}


def make_document_source(
    location: str, *, timeout: float = 5.0, retries: int = 2
) -> DocumentSource:
    parsed = urlparse(location)
    scheme = parsed.scheme.lower()
    # Windows drive letters parse as a one-letter scheme
    if len(scheme) == 1:
        scheme = ""
    cls = _SOURCE_REGISTRY.get(scheme)
    if not cls:
        raise ValueError(f"Unsupported rate source scheme '{scheme}' in {location!r}")
    if cls is HttpDocumentSource:
        return HttpDocumentSource(location, timeout=timeout, retries=retries)
    if scheme == "file":
        return FileDocumentSource(unquote(parsed.path))
    return FileDocumentSource(location)
