"""Extractor for ZIP archives: each member goes back through a delegate extractor."""

from __future__ import annotations

import io
import mimetypes
import zipfile

import structlog

from .base import ParsedContent, TextExtractor

logger = structlog.get_logger()

ZIP_MEDIA_TYPES = frozenset({"application/zip", "application/x-zip-compressed"})


class ZipTextExtractor(TextExtractor):
    """Concatenate the text of every extractable archive member.

    Nested archives are not opened. Members larger than *max_member_bytes*
    (uncompressed) and members beyond *max_members* are skipped.
    """

    def __init__(
        self,
        delegate: TextExtractor,
        *,
        max_members: int = 100,
        max_member_bytes: int = 20 * 1024 * 1024,
    ) -> None:
        self._delegate = delegate
        self._max_members = max_members
        self._max_member_bytes = max_member_bytes

    @property
    def media_types(self) -> frozenset[str]:
        return ZIP_MEDIA_TYPES

    def _extract(self, content: bytes, media_type: str, params: dict[str, str]) -> ParsedContent:
        texts: list[str] = []
        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            members = [info for info in archive.infolist() if not info.is_dir()]
            for info in members[: self._max_members]:
                if info.file_size > self._max_member_bytes:
                    logger.info("zip_member_skipped", member=info.filename, size=info.file_size)
                    continue
                member_type = mimetypes.guess_type(info.filename)[0] or "application/octet-stream"
                if member_type in ZIP_MEDIA_TYPES:
                    continue
                parsed = self._delegate.extract(archive.read(info), member_type)
                if parsed.text:
                    texts.append(parsed.text)
        return ParsedContent(
            text="\n".join(texts),
            metadata={"format": "zip", "members": str(len(members))},
        )
