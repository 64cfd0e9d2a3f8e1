"""Indexer configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars
(``INDEXER_TIME_ZONE``, ``INDEXER_INDEX_ATTACHMENTS``, ...).
"""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .extractors.registry import ExtractorKind
from .models import IndexAttachments


class IndexerConfig(BaseSettings):
    """Top-level indexer configuration."""

    model_config = {"env_prefix": "INDEXER_"}

    time_zone: str = Field(
        default="UTC",
        description="IANA zone used for the date fields of indexed documents",
    )
    index_attachments: IndexAttachments = Field(
        default=IndexAttachments.YES,
        description="Extract attachment text into indexed documents (yes/no)",
    )
    extractor: ExtractorKind = Field(
        default=ExtractorKind.RICH,
        description="Attachment extractor chain: noop, default (text only) or rich",
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        description="Maximum number of messages built concurrently",
    )
    mailbox_id: str = Field(
        default="INBOX",
        description="Mailbox identifier assigned to messages read from files",
    )
    log_level: str = Field(default="INFO", description="Root log level name")
    log_json: bool = Field(default=True, description="Emit JSON log lines")

    @field_validator("time_zone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone: {value!r}") from exc
        return value
