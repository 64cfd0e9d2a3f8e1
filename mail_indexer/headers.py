"""Header collection — decodes the header block of a parsed message.

From/Bcc are kept in plain sets and To/Cc in insertion-ordered dicts, so the
full-text field lists To/Cc values in declaration order while From/Bcc come
out in set iteration order. Subjects are kept as declared, duplicates
included.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from email.message import Message

import structlog

from .extractors.text import scrub_surrogates
from .models import Emailer, HeaderCategory, HeaderField

logger = structlog.get_logger()

_ADDRESS_HEADERS = {
    "from": HeaderCategory.FROM,
    "to": HeaderCategory.TO,
    "cc": HeaderCategory.CC,
    "bcc": HeaderCategory.BCC,
}


@dataclass
class HeaderCollection:
    """Decoded header values, grouped by category."""

    from_addresses: set[Emailer] = field(default_factory=set)
    to_addresses: dict[Emailer, None] = field(default_factory=dict)
    cc_addresses: dict[Emailer, None] = field(default_factory=dict)
    bcc_addresses: set[Emailer] = field(default_factory=set)
    reply_to_addresses: dict[Emailer, None] = field(default_factory=dict)
    subjects: list[str] = field(default_factory=list)
    headers: list[HeaderField] = field(default_factory=list)
    message_id: str | None = None
    sent_date: datetime | None = None

    def emailers(self, category: HeaderCategory) -> list[Emailer]:
        if category is HeaderCategory.FROM:
            return list(self.from_addresses)
        if category is HeaderCategory.TO:
            return list(self.to_addresses)
        if category is HeaderCategory.CC:
            return list(self.cc_addresses)
        if category is HeaderCategory.BCC:
            return list(self.bcc_addresses)
        return []

    def values(self, category: HeaderCategory) -> list[str]:
        """Decoded values of *category*, in the order they enter the text field."""
        if category is HeaderCategory.SUBJECT:
            return list(self.subjects)
        return [emailer.serialize() for emailer in self.emailers(category)]

    def text_segments(self) -> Iterator[str]:
        """One space-joined segment per non-empty category, in category order."""
        for category in HeaderCategory:
            values = [value for value in self.values(category) if value]
            if values:
                yield " ".join(values)

    def _add_emailers(self, category: HeaderCategory, emailers: list[Emailer]) -> None:
        if category is HeaderCategory.FROM:
            self.from_addresses.update(emailers)
        elif category is HeaderCategory.BCC:
            self.bcc_addresses.update(emailers)
        elif category is HeaderCategory.TO:
            self.to_addresses.update(dict.fromkeys(emailers))
        elif category is HeaderCategory.CC:
            self.cc_addresses.update(dict.fromkeys(emailers))


def collect_headers(msg: Message) -> HeaderCollection:
    """Decode every header of *msg* into a :class:`HeaderCollection`.

    Headers are read raw and parsed one at a time, so a single malformed
    header is logged and skipped instead of failing the whole collection.
    """
    collection = HeaderCollection()

    for name, raw_value in msg.raw_items():
        try:
            header = msg.policy.header_fetch_parse(name, raw_value)
            _collect(collection, name.lower(), header)
        except Exception as exc:
            logger.warning("header_parse_failed", header=name, error=str(exc))
            raw_text = scrub_surrogates(str(raw_value).strip())
            collection.headers.append(HeaderField(name=name, value=raw_text))
            continue
        collection.headers.append(HeaderField(name=name, value=scrub_surrogates(str(header))))

    return collection


def _collect(collection: HeaderCollection, key: str, header: str) -> None:
    if key in _ADDRESS_HEADERS:
        collection._add_emailers(_ADDRESS_HEADERS[key], _emailers(header))
    elif key == "reply-to":
        collection.reply_to_addresses.update(dict.fromkeys(_emailers(header)))
    elif key == "subject":
        collection.subjects.append(scrub_surrogates(str(header).strip()))
    elif key == "message-id" and collection.message_id is None:
        collection.message_id = scrub_surrogates(str(header).strip()) or None
    elif key == "date" and collection.sent_date is None:
        collection.sent_date = getattr(header, "datetime", None)


def _emailers(header: object) -> list[Emailer]:
    addresses = getattr(header, "addresses", ())
    emailers = []
    for address in addresses:
        addr_spec = scrub_surrogates(address.addr_spec)
        if not addr_spec or addr_spec == "<>":
            continue
        # a bare address stands in for its own display name
        name = scrub_surrogates(address.display_name or "") or addr_spec
        emailers.append(Emailer(name=name, address=addr_spec))
    return emailers
