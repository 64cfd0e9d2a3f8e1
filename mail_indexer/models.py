"""Value types crossing the indexer boundaries.

``MailboxMessage`` is what the message store hands us; ``IndexableMessage``
is what we hand to the search backend.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class IndexAttachments(str, Enum):
    """Whether attachment text is extracted into the indexed document."""

    YES = "yes"
    NO = "no"


class HeaderCategory(str, Enum):
    """Header categories contributing to the full-text field.

    Declaration order is the concatenation order of ``IndexableMessage.text``.
    """

    FROM = "from"
    TO = "to"
    CC = "cc"
    BCC = "bcc"
    SUBJECT = "subject"


class Flags(BaseModel):
    """IMAP system flags plus user-defined keywords."""

    model_config = {"frozen": True}

    answered: bool = False
    deleted: bool = False
    draft: bool = False
    flagged: bool = False
    recent: bool = False
    seen: bool = False
    user_flags: tuple[str, ...] = Field(
        default=(),
        description="User-defined keywords, in the order the store reports them",
    )


class MailboxMessage(BaseModel):
    """A fully loaded message occurrence, as supplied by the message store."""

    mailbox_id: str = Field(min_length=1, description="Identifier of the containing mailbox")
    uid: int = Field(ge=1, description="Message UID, unique within the mailbox")
    mod_seq: int = Field(default=0, ge=0, description="Modification sequence number")
    flags: Flags = Field(default_factory=Flags)
    internal_date: datetime = Field(description="When the store received the message")
    full_content: bytes = Field(description="Raw RFC 822 bytes, headers and body")
    size: int | None = Field(
        default=None,
        ge=0,
        description="Message size in octets; defaults to the length of full_content",
    )

    @field_validator("internal_date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def content_size(self) -> int:
        return self.size if self.size is not None else len(self.full_content)


class Emailer(BaseModel):
    """A decoded mailbox from an address header."""

    model_config = {"frozen": True}

    name: str | None = None
    address: str

    def serialize(self) -> str:
        return f"{self.name or self.address} {self.address}"


class HeaderField(BaseModel):
    model_config = {"frozen": True}

    name: str
    value: str


class IndexedAttachment(BaseModel):
    """Extraction result for one attachment part."""

    model_config = {"frozen": True}

    content_hash: str = Field(description="SHA-256 hex digest of the decoded payload")
    content_id: str | None = None
    file_name: str | None = None
    file_extension: str | None = None
    media_type: str = Field(description="Main MIME type (e.g. application)")
    subtype: str = Field(description="MIME subtype (e.g. pdf)")
    content_disposition: str | None = None
    size: int = Field(ge=0, description="Decoded payload size in octets")
    text_content: str = Field(
        default="",
        description="Extracted text; empty when extraction is unsupported or failed",
    )


class IndexableMessage(BaseModel):
    """Flattened, immutable search document for one message occurrence.

    Two documents are equal when they describe the same ``(mailbox_id, uid)``;
    re-indexing a message builds a new document instead of updating one.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    id: str
    mailbox_id: str
    uid: int
    mod_seq: int = 0
    users: tuple[str, ...] = ()

    is_answered: bool = False
    is_deleted: bool = False
    is_draft: bool = False
    is_flagged: bool = False
    is_recent: bool = False
    is_unread: bool = True
    user_flags: tuple[str, ...] = ()

    date: datetime = Field(description="Internal date, adjusted to the indexing time zone")
    sent_date: datetime = Field(description="Date header, adjusted to the indexing time zone")
    size: int = 0
    media_type: str = "text"
    subtype: str = "plain"
    mime_message_id: str | None = None

    has_attachment: bool = False
    attachments: tuple[IndexedAttachment, ...] = ()

    from_: tuple[Emailer, ...] = Field(default=(), alias="from")
    to: tuple[Emailer, ...] = ()
    cc: tuple[Emailer, ...] = ()
    bcc: tuple[Emailer, ...] = ()
    reply_to: tuple[Emailer, ...] = ()
    subjects: tuple[str, ...] = ()
    headers: tuple[HeaderField, ...] = ()

    body_text: str = ""
    body_html: str | None = None
    text: str = Field(default="", description="Concatenated full-text search field")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexableMessage):
            return NotImplemented
        return (self.mailbox_id, self.uid) == (other.mailbox_id, other.uid)

    def __hash__(self) -> int:
        return hash((self.mailbox_id, self.uid))

    def to_search_document(self) -> dict[str, Any]:
        """JSON-compatible payload for the search backend."""
        return self.model_dump(mode="json", by_alias=True)
