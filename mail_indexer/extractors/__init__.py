"""Attachment text extractors."""

from .archive import ZipTextExtractor
from .base import NoopTextExtractor, ParsedContent, TextExtractor
from .documents import DocxTextExtractor, PdfTextExtractor, XlsxTextExtractor
from .registry import ExtractorKind, ExtractorRegistry, create_extractor
from .text import DefaultTextExtractor

__all__ = [
    "DefaultTextExtractor",
    "DocxTextExtractor",
    "ExtractorKind",
    "ExtractorRegistry",
    "NoopTextExtractor",
    "ParsedContent",
    "PdfTextExtractor",
    "TextExtractor",
    "XlsxTextExtractor",
    "ZipTextExtractor",
    "create_extractor",
]
