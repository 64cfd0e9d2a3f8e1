"""Extractor registry — dispatches payloads to extractors by media type."""

from __future__ import annotations

from enum import Enum

import structlog

from .archive import ZipTextExtractor
from .base import NoopTextExtractor, ParsedContent, TextExtractor
from .documents import DocxTextExtractor, PdfTextExtractor, XlsxTextExtractor
from .text import DefaultTextExtractor

logger = structlog.get_logger()


class ExtractorKind(str, Enum):
    """Which extractor chain the indexer runs attachments through."""

    NOOP = "noop"
    DEFAULT = "default"
    RICH = "rich"


class ExtractorRegistry(TextExtractor):
    """Registry of extractors, keyed by base media type.

    A key may be a wildcard such as ``text/*``; exact keys win. Unknown
    media types yield ``ParsedContent.empty()``.
    """

    def __init__(self) -> None:
        self._extractors: dict[str, TextExtractor] = {}

    def register(self, extractor: TextExtractor) -> None:
        """Register an extractor for each of its media types."""
        for media_type in extractor.media_types:
            self._extractors[media_type] = extractor
        logger.debug(
            "extractor_registered",
            extractor=type(extractor).__name__,
            media_types=sorted(extractor.media_types),
        )

    def get(self, media_type: str) -> TextExtractor | None:
        """Look up the extractor for a base media type. Returns None if unsupported."""
        media_type = media_type.lower()
        found = self._extractors.get(media_type)
        if found is None:
            main_type = media_type.split("/", 1)[0]
            found = self._extractors.get(f"{main_type}/*")
        return found

    @property
    def media_types(self) -> frozenset[str]:
        return frozenset(self._extractors)

    def _extract(self, content: bytes, media_type: str, params: dict[str, str]) -> ParsedContent:
        extractor = self.get(media_type)
        if extractor is None:
            logger.debug("extractor_not_found", media_type=media_type)
            return ParsedContent.empty()
        content_type = "; ".join([media_type, *(f'{k}="{v}"' for k, v in params.items())])
        return extractor.extract(content, content_type)


def create_extractor(kind: ExtractorKind | str = ExtractorKind.RICH) -> TextExtractor:
    """Build the extractor chain for *kind*."""
    kind = ExtractorKind(kind)
    if kind is ExtractorKind.NOOP:
        return NoopTextExtractor()

    registry = ExtractorRegistry()
    registry.register(DefaultTextExtractor())
    if kind is ExtractorKind.RICH:
        registry.register(PdfTextExtractor())
        registry.register(DocxTextExtractor())
        registry.register(XlsxTextExtractor())
        registry.register(ZipTextExtractor(registry))
    return registry
