"""Abstract base class for attachment text extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from email.message import Message
from email.utils import collapse_rfc2231_value

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class ParsedContent:
    """Outcome of one extraction. ``text is None`` means unsupported or failed."""

    text: str | None
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> ParsedContent:
        return cls(text=None)

    @property
    def succeeded(self) -> bool:
        return self.text is not None


def split_content_type(content_type: str) -> tuple[str, dict[str, str]]:
    """Split ``type/subtype; k=v`` into the lowercased media type and its params."""
    if "/" not in content_type.split(";", 1)[0]:
        return "application/octet-stream", {}
    header = Message()
    header["Content-Type"] = content_type
    params = {
        key.lower(): collapse_rfc2231_value(value)
        for key, value in header.get_params(failobj=[])[1:]
    }
    return header.get_content_type(), params


class TextExtractor(ABC):
    """Turn a binary payload plus its declared media type into plain text.

    Concrete extractors implement ``_extract`` and may raise freely; the
    public ``extract`` never raises and reports failures as
    ``ParsedContent.empty()``.  Implementations hold no mutable state, so a
    single instance can serve concurrent builds.
    """

    @property
    @abstractmethod
    def media_types(self) -> frozenset[str]:
        """Base media types (``type/subtype``) this extractor handles."""

    @abstractmethod
    def _extract(self, content: bytes, media_type: str, params: dict[str, str]) -> ParsedContent:
        """Extract text from *content*. May raise on corrupt input."""

    def extract(self, content: bytes, content_type: str) -> ParsedContent:
        media_type, params = split_content_type(content_type)
        try:
            return self._extract(content, media_type, params)
        except Exception as exc:
            logger.warning(
                "text_extraction_failed",
                extractor=type(self).__name__,
                media_type=media_type,
                size=len(content),
                error=str(exc),
            )
            return ParsedContent.empty()


class NoopTextExtractor(TextExtractor):
    """Extracts nothing. Used when extraction is disabled."""

    @property
    def media_types(self) -> frozenset[str]:
        return frozenset()

    def _extract(self, content: bytes, media_type: str, params: dict[str, str]) -> ParsedContent:
        return ParsedContent.empty()
