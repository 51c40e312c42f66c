from __future__ import annotations

"""Two-step resolution of the rate document: primary source, then backup.

Only a failed fetch (SourceUnavailableError) moves on to the backup. A primary
document that arrives but does not parse is reported as a FormatError, unless
the caller opts into ``fallback_on_format_error``. If the backup fails to
fetch too, a single SourceUnavailableError names both locations.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fxref.core.exceptions import FormatError, RateError, SourceUnavailableError
from fxref.models.rates import RateDocument
from .base import DocumentSource
from .parser import parse_rate_document

logger = logging.getLogger("fxref.rates.resolver")

Parser = Callable[[bytes, str], RateDocument]


@dataclass(frozen=True)
class Resolution:
    document: RateDocument
    location: str
    used_backup: bool = False
    primary_error: Optional[RateError] = None


def _load(source: DocumentSource, parse: Parser) -> RateDocument:
    return parse(source.fetch(), source.location)


def resolve_rate_document(
    primary: DocumentSource,
    backup: Optional[DocumentSource] = None,
    *,
    fallback_on_format_error: bool = False,
    parse: Parser = parse_rate_document,
) -> Resolution:
    fallback_on = (SourceUnavailableError, FormatError) if fallback_on_format_error else (
        SourceUnavailableError,
    )
    try:
        document = _load(primary, parse)
    except fallback_on as primary_err:
        if backup is None:
            raise
        logger.warning(
            "primary rate source failed, falling back to backup: %s",
            primary_err,
            extra={"location": backup.location, "used_backup": True},
        )
        try:
            document = _load(backup, parse)
        except SourceUnavailableError as backup_err:
            raise SourceUnavailableError(
                f"{primary.location} | {backup.location}",
                f"primary: {primary_err}; backup: {backup_err.reason}",
            ) from backup_err
        return Resolution(
            document=document,
            location=backup.location,
            used_backup=True,
            primary_error=primary_err,
        )

    logger.info(
        "loaded rate document",
        extra={"location": primary.location, "as_of": document.as_of.isoformat()},
    )
    return Resolution(document=document, location=primary.location)
