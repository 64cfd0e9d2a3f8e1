"""Mail indexer — flattens stored email messages into full-text search documents."""

from .builder import MessageDocumentBuilder, build_indexable_message
from .config import IndexerConfig
from .headers import HeaderCollection, collect_headers
from .logging import setup_logging
from .models import (
    Emailer,
    Flags,
    HeaderCategory,
    HeaderField,
    IndexableMessage,
    IndexAttachments,
    IndexedAttachment,
    MailboxMessage,
)
from .service import IndexingService
from .walker import AttachmentPart, MimeWalker, MimeWalkResult

__all__ = [
    "AttachmentPart",
    "Emailer",
    "Flags",
    "HeaderCategory",
    "HeaderCollection",
    "HeaderField",
    "IndexAttachments",
    "IndexableMessage",
    "IndexedAttachment",
    "IndexerConfig",
    "IndexingService",
    "MailboxMessage",
    "MessageDocumentBuilder",
    "MimeWalkResult",
    "MimeWalker",
    "build_indexable_message",
    "collect_headers",
    "setup_logging",
]
