from __future__ import annotations

"""Document source abstraction.

A source produces the raw bytes of a rate document. Retrieval failures of any
kind surface as SourceUnavailableError so the resolver can tell them apart
from a document that was fetched but does not parse.
"""
from abc import ABC, abstractmethod


class DocumentSource(ABC):
    location: str = "<unknown>"

    @abstractmethod
    def fetch(self) -> bytes:
        """Return the document body or raise SourceUnavailableError."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.location!r})"
