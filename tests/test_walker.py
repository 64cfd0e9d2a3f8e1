"""Tests for mail_indexer.walker."""

from __future__ import annotations

import email
import email.policy
from email.mime.application import MIMEApplication
from email.mime.image import MIMEImage
from email.mime.message import MIMEMessage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import pytest

from tests.conftest import _build_multipart_email, _build_plain_email

from mail_indexer.extractors import DefaultTextExtractor
from mail_indexer.walker import AttachmentPart, MimeWalker

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def _parse(raw: bytes):
    return email.message_from_bytes(raw, policy=email.policy.default)


@pytest.fixture
def walker() -> MimeWalker:
    return MimeWalker()


class TestBody:
    def test_plain_message(self, walker: MimeWalker):
        result = walker.walk(_parse(_build_plain_email(body="Hello, World!")))
        assert result.body_text == "Hello, World!"
        assert result.body_html is None
        assert result.attachments == []
        assert (result.media_type, result.subtype) == ("text", "plain")

    def test_empty_message(self, walker: MimeWalker):
        result = walker.walk(_parse(b""))
        assert result.body_text == ""
        assert result.attachments == []

    def test_headers_only_message(self, walker: MimeWalker):
        result = walker.walk(_parse(b"Subject: no body"))
        assert result.body_text == ""

    def test_multipart_without_boundary_is_read_as_text(self, walker: MimeWalker):
        raw = (
            b"Content-Type: multipart/mixed\n"
            b"\n"
            b"--x\n"
            b"Content-Type: text/plain\n"
            b"\n"
            b"inner text\n"
            b"--x--\n"
        )
        result = walker.walk(_parse(raw))
        assert "inner text" in result.body_text
        assert result.attachments == []

    def test_leading_separator_not_in_body(self, walker: MimeWalker):
        result = walker.walk(_parse(b"\nMy body"))
        assert result.body_text == "My body"

    def test_first_text_part_wins(self, walker: MimeWalker):
        msg = MIMEMultipart("mixed")
        msg.attach(MIMEText("first", "plain"))
        msg.attach(MIMEText("second", "plain"))
        result = walker.walk(_parse(msg.as_bytes()))
        assert result.body_text == "first"
        assert result.attachments == []

    def test_alternative_keeps_both_bodies(self, walker: MimeWalker):
        raw = _build_multipart_email(body_text="Plain text", body_html="<p>HTML</p>")
        result = walker.walk(_parse(raw))
        assert result.body_text == "Plain text"
        assert result.body_html == "<p>HTML</p>"
        assert (result.media_type, result.subtype) == ("multipart", "mixed")

    def test_charset_decoding(self, walker: MimeWalker):
        raw = MIMEText("Grüße", "plain", "iso-8859-1").as_bytes()
        assert walker.walk(_parse(raw)).body_text == "Grüße"

    def test_unknown_charset_falls_back(self, walker: MimeWalker):
        raw = b"Content-Type: text/plain; charset=x-no-such-charset\n\nplain ascii"
        assert walker.walk(_parse(raw)).body_text == "plain ascii"

    def test_quoted_printable(self, walker: MimeWalker):
        raw = (
            b"Content-Type: text/plain; charset=utf-8\n"
            b"Content-Transfer-Encoding: quoted-printable\n"
            b"\n"
            b"caf=C3=A9"
        )
        assert walker.walk(_parse(raw)).body_text == "café"


class TestAttachments:
    def test_structural_order(self, walker: MimeWalker):
        raw = _build_multipart_email(
            attachments=[
                ("report.pdf", "application/pdf", b"%PDF-1.4 fake"),
                ("data.csv", "text/csv", b"col1,col2\n"),
            ],
        )
        result = walker.walk(_parse(raw))
        assert [a.file_name for a in result.attachments] == ["report.pdf", "data.csv"]
        assert [a.media_type for a in result.attachments] == ["application/pdf", "text/csv"]
        assert result.attachments[0].payload == b"%PDF-1.4 fake"

    def test_inline_image_without_filename(self, walker: MimeWalker):
        msg = MIMEMultipart("related")
        msg.attach(MIMEText("<img src='cid:logo'>", "html"))
        image = MIMEImage(PNG_HEADER, "png")
        image.add_header("Content-ID", "<logo>")
        msg.attach(image)

        result = walker.walk(_parse(msg.as_bytes()))
        assert len(result.attachments) == 1
        assert result.attachments[0].content_id == "logo"
        assert result.attachments[0].file_name is None
        assert result.attachments[0].payload == PNG_HEADER

    def test_nested_message_is_descended(self, walker: MimeWalker):
        inner = MIMEMultipart("mixed")
        inner.attach(MIMEText("inner body", "plain"))
        inner.attach(MIMEApplication(b"inner bytes", "octet-stream", Name="inner.bin"))

        outer = MIMEMultipart("mixed")
        outer.attach(MIMEText("outer body", "plain"))
        outer.attach(MIMEMessage(inner))

        result = walker.walk(_parse(outer.as_bytes()))
        assert result.body_text == "outer body"
        assert [a.payload for a in result.attachments] == [b"inner bytes"]

    def test_single_part_binary_message(self, walker: MimeWalker):
        raw = MIMEApplication(b"%PDF-1.4", "pdf").as_bytes()
        result = walker.walk(_parse(raw))
        assert result.body_text == ""
        assert [a.media_type for a in result.attachments] == ["application/pdf"]


class TestIndexAttachments:
    def test_results_keep_order_and_identity(self, walker: MimeWalker):
        parts = [
            AttachmentPart(payload=b"one", content_type="text/plain", file_name="One.TXT"),
            AttachmentPart(payload=b"\x00", content_type="application/octet-stream"),
        ]
        results = walker.index_attachments(parts, DefaultTextExtractor())
        assert [r.text_content for r in results] == ["one", ""]
        assert results[0].file_extension == "txt"
        assert results[1].file_extension is None
        assert (results[1].media_type, results[1].subtype) == ("application", "octet-stream")
        assert results[0].size == 3

    def test_empty_list(self, walker: MimeWalker):
        assert walker.index_attachments([], DefaultTextExtractor()) == []
