"""MIME walker — separates the text body from attachment parts and routes
attachment payloads through a text extractor.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from email.message import Message
from pathlib import PurePosixPath

import structlog

from .extractors.base import TextExtractor
from .extractors.text import decode_text, html_to_text, scrub_surrogates
from .models import IndexedAttachment

logger = structlog.get_logger()


@dataclass(frozen=True)
class AttachmentPart:
    """A single attachment leaf found in the MIME tree."""

    payload: bytes
    content_type: str
    file_name: str | None = None
    content_disposition: str | None = None
    content_id: str | None = None

    @property
    def media_type(self) -> str:
        return self.content_type.split(";", 1)[0].strip().lower()


@dataclass
class MimeWalkResult:
    body_text: str = ""
    body_html: str | None = None
    attachments: list[AttachmentPart] = field(default_factory=list)
    media_type: str = "text"
    subtype: str = "plain"


class MimeWalker:
    """Stateless depth-first walk over a parsed message."""

    def walk(self, msg: Message) -> MimeWalkResult:
        result = MimeWalkResult(
            media_type=msg.get_content_maintype(),
            subtype=msg.get_content_subtype(),
        )
        body_text: str | None = None

        for part in msg.walk():
            # multipart/* and message/rfc822 containers have no content of their own
            if part.is_multipart():
                continue

            try:
                disposition = part.get_content_disposition()
                filename = part.get_filename()

                if self._is_attachment(part, disposition, filename):
                    result.attachments.append(self._attachment(part, disposition, filename))
                    continue

                content_type = part.get_content_type()
                if content_type == "text/plain" and body_text is None:
                    body_text = self._decode(part)
                elif content_type == "text/html" and result.body_html is None:
                    result.body_html = self._decode(part)
                elif part.get_content_maintype() == "multipart" and body_text is None:
                    # a multipart part without a usable boundary is left unsplit
                    body_text = self._decode(part)
            except Exception as exc:
                logger.warning(
                    "mime_part_skipped",
                    content_type=part.get("Content-Type", ""),
                    error=str(exc),
                )

        if body_text is None and result.body_html is not None:
            body_text = html_to_text(result.body_html)
        result.body_text = body_text or ""
        return result

    def index_attachments(
        self,
        attachments: list[AttachmentPart],
        extractor: TextExtractor,
    ) -> list[IndexedAttachment]:
        """Run every attachment through *extractor*, keeping structural order.

        A failed extraction leaves that attachment with empty text and does
        not affect the others.
        """
        return [self._index_attachment(part, extractor) for part in attachments]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _is_attachment(part: Message, disposition: str | None, filename: str | None) -> bool:
        return (
            disposition == "attachment"
            or bool(filename)
            or part.get_content_maintype() not in ("text", "multipart")
        )

    @staticmethod
    def _attachment(part: Message, disposition: str | None, filename: str | None) -> AttachmentPart:
        content_id = part.get("Content-ID")
        return AttachmentPart(
            payload=part.get_payload(decode=True) or b"",
            content_type=scrub_surrogates(str(part.get("Content-Type") or part.get_content_type())),
            file_name=scrub_surrogates(filename) if filename else None,
            content_disposition=disposition,
            content_id=scrub_surrogates(str(content_id).strip().strip("<>")) if content_id else None,
        )

    @staticmethod
    def _decode(part: Message) -> str:
        payload = part.get_payload(decode=True) or b""
        return decode_text(payload, part.get_content_charset())

    @staticmethod
    def _index_attachment(part: AttachmentPart, extractor: TextExtractor) -> IndexedAttachment:
        try:
            parsed = extractor.extract(part.payload, part.content_type)
            text = parsed.text or ""
        except Exception:
            logger.warning(
                "attachment_extraction_failed",
                media_type=part.media_type,
                file_name=part.file_name,
                exc_info=True,
            )
            text = ""

        media_type, _, subtype = part.media_type.partition("/")
        extension = PurePosixPath(part.file_name).suffix.lstrip(".").lower() if part.file_name else ""
        return IndexedAttachment(
            content_hash=hashlib.sha256(part.payload).hexdigest(),
            content_id=part.content_id,
            file_name=part.file_name,
            file_extension=extension or None,
            media_type=media_type or "application",
            subtype=subtype or "octet-stream",
            content_disposition=part.content_disposition,
            size=len(part.payload),
            text_content=text,
        )
