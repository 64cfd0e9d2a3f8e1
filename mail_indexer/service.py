"""IndexingService — builds documents for a batch of messages concurrently.

Each build runs synchronously on a worker thread and owns its own parse
tree; the only shared object is the stateless extractor.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from .builder import MessageDocumentBuilder
from .config import IndexerConfig
from .extractors import TextExtractor
from .models import IndexableMessage, MailboxMessage

logger = structlog.get_logger()


class IndexingService:
    """Runs independent document builds, at most ``max_workers`` at a time.

    A message whose build raises is logged and left out of the result;
    nothing is retried.
    """

    def __init__(self, config: IndexerConfig, extractor: TextExtractor | None = None) -> None:
        self._config = config
        self._builder = MessageDocumentBuilder.from_config(config, extractor)
        self._documents_built: int = 0
        self._failures: int = 0

    @property
    def documents_built(self) -> int:
        return self._documents_built

    @property
    def failures(self) -> int:
        return self._failures

    async def build_documents(
        self,
        messages: Iterable[MailboxMessage],
        users: Iterable[str],
    ) -> list[IndexableMessage]:
        """Build one document per message, preserving input order."""
        users = tuple(users)
        semaphore = asyncio.Semaphore(self._config.max_workers)

        async def build_one(message: MailboxMessage) -> IndexableMessage | None:
            async with semaphore:
                try:
                    document = await asyncio.to_thread(self._builder.build, message, users)
                except Exception:
                    self._failures += 1
                    logger.exception(
                        "document_build_failed",
                        mailbox_id=message.mailbox_id,
                        uid=message.uid,
                    )
                    return None
                self._documents_built += 1
                return document

        results = await asyncio.gather(*(build_one(m) for m in messages))
        documents = [doc for doc in results if doc is not None]
        logger.info(
            "documents_built",
            documents=len(documents),
            failed=len(results) - len(documents),
        )
        return documents
