"""Shared test fixtures for the mail indexer test suite."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import pytest
from openpyxl import Workbook

from mail_indexer.config import IndexerConfig
from mail_indexer.extractors import ExtractorKind
from mail_indexer.models import Flags, MailboxMessage

MESSAGE_UID = 154
MAILBOX_ID = "1"

MAIL_WITH_HEADERS = (
    b"Return-Path: <admin@opush.test>\n"
    b"From: Ad Min <admin@opush.test>\n"
    b"To: a@test, B <b@test>\n"
    b"Cc: c@test\n"
    b"Bcc: dD <d@test>\n"
    b"Subject: my subject\n"
    b"Message-ID: <157390@opush.test>\n"
    b"Date: Tue, 14 Jul 2015 12:30:42 +0000\n"
    b"MIME-Version: 1.0\n"
    b"Content-Type: text/plain; charset=utf-8\n"
    b"Content-Transfer-Encoding: 7bit\n"
    b"\n"
    b"Mail content\n"
    b"\n"
    b"-- \n"
    b"Ad Min\n"
)

LATIN1_HEADERS = b"From: \xe9ric <eric@example.com>\nSubject: caf\xe9\n\nbody"


@pytest.fixture
def indexer_config() -> IndexerConfig:
    return IndexerConfig(
        time_zone="Europe/Paris",
        extractor=ExtractorKind.RICH,
        max_workers=2,
        log_json=False,
    )


# ------------------------------------------------------------------
# Message builders
# ------------------------------------------------------------------


def make_message(
    content: bytes,
    *,
    mailbox_id: str = MAILBOX_ID,
    uid: int = MESSAGE_UID,
    flags: Flags | None = None,
    internal_date: datetime | None = None,
) -> MailboxMessage:
    """Wrap raw bytes the way the message store would hand them over."""
    return MailboxMessage(
        mailbox_id=mailbox_id,
        uid=uid,
        flags=flags or Flags(),
        internal_date=internal_date or datetime(2015, 7, 14, 12, 30, 42, tzinfo=timezone.utc),
        full_content=content,
    )


def _build_plain_email(
    *,
    subject: str = "Test Subject",
    from_addr: str = "sender@example.com",
    to_addr: str = "recipient@example.com",
    body: str = "Hello, World!",
    message_id: str = "<test-001@example.com>",
    date: str = "Mon, 02 Jun 2025 12:00:00 +0000",
    cc: str | None = None,
) -> bytes:
    """Build a simple plain-text email as raw bytes."""
    msg = MIMEText(body, "plain")
    msg["Subject"] = subject
    msg["From"] = from_addr
    msg["To"] = to_addr
    msg["Message-ID"] = message_id
    msg["Date"] = date
    if cc:
        msg["Cc"] = cc
    return msg.as_bytes()


def _build_multipart_email(
    *,
    body_text: str | None = "Plain body",
    body_html: str | None = "<p>HTML body</p>",
    attachments: list[tuple[str, str, bytes]] | None = None,
) -> bytes:
    """Build a multipart email with text, HTML, and optional attachments."""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = "Multipart Email"
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Message-ID"] = "<multi-001@example.com>"
    msg["Date"] = "Mon, 02 Jun 2025 12:00:00 +0000"

    alt = MIMEMultipart("alternative")
    if body_text is not None:
        alt.attach(MIMEText(body_text, "plain"))
    if body_html is not None:
        alt.attach(MIMEText(body_html, "html"))
    msg.attach(alt)

    for filename, content_type, payload in attachments or []:
        maintype, subtype = content_type.split("/", 1)
        part = MIMEBase(maintype, subtype)
        part.set_payload(payload)
        encoders.encode_base64(part)
        part.add_header("Content-Disposition", "attachment", filename=filename)
        msg.attach(part)

    return msg.as_bytes()


def _build_xlsx(rows: list[list[object]]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def mail_with_headers() -> MailboxMessage:
    return make_message(MAIL_WITH_HEADERS)


@pytest.fixture
def multipart_eml_bytes() -> bytes:
    return _build_multipart_email(
        attachments=[
            ("notes.txt", "text/plain", b"quarterly figures attached"),
            ("data.csv", "text/csv", b"col1,col2\na,b\n"),
        ],
    )
