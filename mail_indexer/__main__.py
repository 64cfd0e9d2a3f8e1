"""Command-line entry point: build search documents from ``.eml`` files.

Writes one JSON document per line. Settings come from ``INDEXER_*``
environment variables; command-line options override them.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import structlog
from pydantic import ValidationError

from .config import IndexerConfig
from .logging import setup_logging
from .models import IndexAttachments, MailboxMessage
from .service import IndexingService

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mail-indexer",
        description="Build full-text search documents from raw email messages",
    )
    parser.add_argument("files", nargs="+", type=Path, help="RFC 822 message files")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON lines here instead of stdout",
    )
    parser.add_argument(
        "--user",
        action="append",
        default=[],
        help="Owner of the mailbox (repeatable)",
    )
    parser.add_argument("--mailbox-id", default=None, help="Mailbox identifier")
    parser.add_argument("--time-zone", default=None, help="IANA zone for document dates")
    parser.add_argument(
        "--no-attachments",
        action="store_true",
        help="Skip attachment text extraction",
    )
    return parser


def _load_messages(paths: list[Path], mailbox_id: str) -> tuple[list[MailboxMessage], int]:
    messages: list[MailboxMessage] = []
    failed = 0
    for uid, path in enumerate(paths, start=1):
        try:
            content = path.read_bytes()
            mtime = path.stat().st_mtime
        except OSError as exc:
            failed += 1
            logger.error("message_read_failed", path=str(path), error=str(exc))
            continue
        messages.append(MailboxMessage(
            mailbox_id=mailbox_id,
            uid=uid,
            internal_date=datetime.fromtimestamp(mtime, tz=timezone.utc),
            full_content=content,
        ))
    return messages, failed


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    overrides: dict[str, object] = {}
    if args.mailbox_id:
        overrides["mailbox_id"] = args.mailbox_id
    if args.time_zone:
        overrides["time_zone"] = args.time_zone
    if args.no_attachments:
        overrides["index_attachments"] = IndexAttachments.NO

    try:
        config = IndexerConfig(**overrides)
    except ValidationError as exc:
        parser.error(str(exc))

    setup_logging(json=config.log_json, level=config.log_level)

    messages, failed = _load_messages(args.files, config.mailbox_id)
    service = IndexingService(config)
    documents = asyncio.run(service.build_documents(messages, args.user))

    lines = [json.dumps(doc.to_search_document(), ensure_ascii=False) for doc in documents]
    if args.output is not None:
        args.output.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    else:
        for line in lines:
            sys.stdout.write(f"{line}\n")

    return 1 if failed or service.failures else 0


if __name__ == "__main__":
    sys.exit(main())
