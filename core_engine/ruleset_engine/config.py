"""Ruleset diff configuration loaded from environment variables."""

from __future__ import annotations

import codecs
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ruleset_engine.diff.ruleset_diff import TableOrder

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables with IPTDIFF_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="IPTDIFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False
    structured_logging: bool = False

    # Presentation
    no_color: bool = False
    table_order: TableOrder = TableOrder.SORTED

    # Input
    encoding: str = "utf-8"

    @field_validator("encoding")
    @classmethod
    def known_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding '{v}'.") from exc
        return v


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info("Loaded settings: table_order=%s encoding=%s", settings.table_order.value, settings.encoding)

    return settings
