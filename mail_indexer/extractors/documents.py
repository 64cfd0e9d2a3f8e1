"""Extractors for office documents and PDFs."""

from __future__ import annotations

import io

import docx
from openpyxl import load_workbook
from pypdf import PdfReader

from .base import ParsedContent, TextExtractor

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class PdfTextExtractor(TextExtractor):
    @property
    def media_types(self) -> frozenset[str]:
        return frozenset({"application/pdf", "application/x-pdf"})

    def _extract(self, content: bytes, media_type: str, params: dict[str, str]) -> ParsedContent:
        reader = PdfReader(io.BytesIO(content))
        pages = [page.extract_text() or "" for page in reader.pages]
        return ParsedContent(
            text="\n\n".join(p for p in pages if p),
            metadata={"format": "pdf", "pages": str(len(pages))},
        )


class DocxTextExtractor(TextExtractor):
    """Paragraph and table text from Word documents."""

    @property
    def media_types(self) -> frozenset[str]:
        return frozenset({DOCX_MEDIA_TYPE})

    def _extract(self, content: bytes, media_type: str, params: dict[str, str]) -> ParsedContent:
        document = docx.Document(io.BytesIO(content))
        parts = [p.text for p in document.paragraphs if p.text]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text for cell in row.cells if cell.text]
                if cells:
                    parts.append(" ".join(cells))
        return ParsedContent(text="\n".join(parts), metadata={"format": "docx"})


class XlsxTextExtractor(TextExtractor):
    """Cell values from Excel workbooks, one line per non-empty row."""

    @property
    def media_types(self) -> frozenset[str]:
        return frozenset({XLSX_MEDIA_TYPE})

    def _extract(self, content: bytes, media_type: str, params: dict[str, str]) -> ParsedContent:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        try:
            lines: list[str] = []
            for sheet in workbook.worksheets:
                for row in sheet.iter_rows(values_only=True):
                    values = [str(v) for v in row if v is not None and str(v).strip()]
                    if values:
                        lines.append(" ".join(values))
            sheets = len(workbook.worksheets)
        finally:
            workbook.close()
        return ParsedContent(
            text="\n".join(lines),
            metadata={"format": "xlsx", "sheets": str(sheets)},
        )
