"""Extractor for textual attachments (``text/*``)."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from .base import ParsedContent, TextExtractor

_BLANK_RUNS = re.compile(r"\n{3,}")


def decode_text(content: bytes, charset: str | None) -> str:
    """Decode *content* with *charset*, falling back to UTF-8 with replacement."""
    try:
        return content.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


def scrub_surrogates(value: str) -> str:
    """Replace undecodable 8-bit bytes smuggled through the parser as lone surrogates.

    ``email.policy.default`` keeps raw non-ASCII header bytes as
    ``\\udc80``-``\\udcff`` escapes, which cannot be written out as UTF-8.
    """
    if value.isascii():
        return value
    return value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def html_to_text(html: str) -> str:
    """Strip markup, scripts and styles from an HTML document."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    text = soup.get_text(separator="\n")
    lines = (line.strip() for line in text.splitlines())
    return _BLANK_RUNS.sub("\n\n", "\n".join(lines)).strip()


class DefaultTextExtractor(TextExtractor):
    """Decodes any ``text/*`` payload; HTML is reduced to its visible text."""

    @property
    def media_types(self) -> frozenset[str]:
        return frozenset({"text/*"})

    def _extract(self, content: bytes, media_type: str, params: dict[str, str]) -> ParsedContent:
        if not media_type.startswith("text/"):
            return ParsedContent.empty()

        text = decode_text(content, params.get("charset"))
        if media_type == "text/html":
            return ParsedContent(text=html_to_text(text), metadata={"format": "html"})
        return ParsedContent(text=text, metadata={"format": media_type.split("/", 1)[1]})
