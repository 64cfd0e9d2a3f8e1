"""Document builder — turns a stored message into an ``IndexableMessage``."""

from __future__ import annotations

import email
import email.policy
from collections.abc import Iterable
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

import structlog

from .config import IndexerConfig
from .extractors import TextExtractor, create_extractor
from .headers import collect_headers
from .models import HeaderCategory, IndexableMessage, IndexAttachments, MailboxMessage
from .walker import MimeWalker

logger = structlog.get_logger()


def build_indexable_message(
    message: MailboxMessage,
    users: Iterable[str],
    extractor: TextExtractor,
    zone: tzinfo | str,
    index_attachments: IndexAttachments = IndexAttachments.YES,
) -> IndexableMessage:
    """Build the search document for one message occurrence.

    The raw content is parsed once. Malformed content never fails the build:
    unreadable bytes give an empty ``text``, and an attachment that cannot
    be extracted keeps empty text of its own. The zone only affects
    ``date`` and ``sent_date``.
    """
    zone = ZoneInfo(zone) if isinstance(zone, str) else zone
    index_attachments = IndexAttachments(index_attachments)

    msg = email.message_from_bytes(message.full_content, policy=email.policy.default)
    headers = collect_headers(msg)
    walker = MimeWalker()
    walked = walker.walk(msg)

    attachments = []
    if index_attachments is IndexAttachments.YES:
        attachments = walker.index_attachments(walked.attachments, extractor)

    segments = list(headers.text_segments())
    if walked.body_text:
        segments.append(walked.body_text)

    date = message.internal_date.astimezone(zone)
    flags = message.flags

    document = IndexableMessage(
        id=f"{message.mailbox_id}:{message.uid}",
        mailbox_id=message.mailbox_id,
        uid=message.uid,
        mod_seq=message.mod_seq,
        users=tuple(sorted(set(users))),
        is_answered=flags.answered,
        is_deleted=flags.deleted,
        is_draft=flags.draft,
        is_flagged=flags.flagged,
        is_recent=flags.recent,
        is_unread=not flags.seen,
        user_flags=flags.user_flags,
        date=date,
        sent_date=_sent_date(headers.sent_date, date, zone),
        size=message.content_size,
        media_type=walked.media_type,
        subtype=walked.subtype,
        mime_message_id=headers.message_id,
        has_attachment=bool(walked.attachments),
        attachments=tuple(attachments),
        from_=tuple(headers.emailers(HeaderCategory.FROM)),
        to=tuple(headers.emailers(HeaderCategory.TO)),
        cc=tuple(headers.emailers(HeaderCategory.CC)),
        bcc=tuple(headers.emailers(HeaderCategory.BCC)),
        reply_to=tuple(headers.reply_to_addresses),
        subjects=tuple(headers.subjects),
        headers=tuple(headers.headers),
        body_text=walked.body_text,
        body_html=walked.body_html,
        text=" ".join(segments),
    )

    logger.debug(
        "document_built",
        document_id=document.id,
        has_attachment=document.has_attachment,
        attachments=len(document.attachments),
    )
    return document


def _sent_date(sent: datetime | None, fallback: datetime, zone: tzinfo) -> datetime:
    if sent is None:
        return fallback
    if sent.tzinfo is None:
        sent = sent.replace(tzinfo=timezone.utc)
    try:
        return sent.astimezone(zone)
    except (OverflowError, ValueError):
        logger.info("sent_date_out_of_range", sent_date=str(sent))
        return fallback


class MessageDocumentBuilder:
    """Binds an extractor, time zone and attachment policy for repeated builds."""

    def __init__(
        self,
        extractor: TextExtractor,
        zone: tzinfo | str = "UTC",
        index_attachments: IndexAttachments = IndexAttachments.YES,
    ) -> None:
        self._extractor = extractor
        self._zone = ZoneInfo(zone) if isinstance(zone, str) else zone
        self._index_attachments = IndexAttachments(index_attachments)

    @classmethod
    def from_config(
        cls,
        config: IndexerConfig,
        extractor: TextExtractor | None = None,
    ) -> MessageDocumentBuilder:
        return cls(
            extractor=extractor or create_extractor(config.extractor),
            zone=config.time_zone,
            index_attachments=config.index_attachments,
        )

    @property
    def extractor(self) -> TextExtractor:
        return self._extractor

    def build(self, message: MailboxMessage, users: Iterable[str]) -> IndexableMessage:
        return build_indexable_message(
            message,
            users,
            self._extractor,
            self._zone,
            self._index_attachments,
        )
