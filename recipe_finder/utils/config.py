"""Configuration management for the recipe search engine.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import List

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


DEFAULT_AFFINITY_TERMS = "nepal,nepali,momo,dal,bhat,chana,achar"


def _split_csv(raw: str) -> List[str]:
    """Split a comma-separated env value into lower-cased, non-empty items."""
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Minimum match score a recipe needs to appear in ranked results. Default: 10
        self.MIN_MATCH_SCORE: int = int(os.getenv("MIN_MATCH_SCORE", "10"))
        # Provenance label of community-submitted recipes (earns a flat bonus)
        self.COMMUNITY_SOURCE: str = os.getenv("COMMUNITY_SOURCE", "Community")
        # Provenance label of the curated regional collection boosted by AFFINITY_TERMS
        self.AFFINITY_SOURCE: str = os.getenv("AFFINITY_SOURCE", "Nepali Collection")
        # Query terms that trigger the regional collection boost (comma-separated)
        self.AFFINITY_TERMS: List[str] = _split_csv(os.getenv("AFFINITY_TERMS", DEFAULT_AFFINITY_TERMS))
        # Extra stop words appended to the built-in list (comma-separated)
        self.EXTRA_STOP_WORDS: List[str] = _split_csv(os.getenv("EXTRA_STOP_WORDS", ""))
        # Maximum number of "did you mean" suggestions. Default: 3
        self.MAX_SUGGESTIONS: int = int(os.getenv("MAX_SUGGESTIONS", "3"))
        # Default page size for paginated search responses. Default: 12
        self.PAGE_SIZE: int = int(os.getenv("PAGE_SIZE", "12"))
        # Length of description previews built by the source adapters. Default: 150
        self.DESCRIPTION_PREVIEW_CHARS: int = int(os.getenv("DESCRIPTION_PREVIEW_CHARS", "150"))

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a threshold or size is out of range or a provenance label is empty.
        """
        if self.MIN_MATCH_SCORE < 0:
            raise ValueError(f"MIN_MATCH_SCORE must be non-negative, got: {self.MIN_MATCH_SCORE}")
        if self.MAX_SUGGESTIONS < 1:
            raise ValueError(f"MAX_SUGGESTIONS must be at least 1, got: {self.MAX_SUGGESTIONS}")
        if self.PAGE_SIZE < 1:
            raise ValueError(f"PAGE_SIZE must be at least 1, got: {self.PAGE_SIZE}")
        if self.DESCRIPTION_PREVIEW_CHARS < 1:
            raise ValueError(
                f"DESCRIPTION_PREVIEW_CHARS must be at least 1, got: {self.DESCRIPTION_PREVIEW_CHARS}"
            )
        if not self.COMMUNITY_SOURCE.strip():
            raise ValueError("COMMUNITY_SOURCE must not be empty")
        if not self.AFFINITY_SOURCE.strip():
            raise ValueError("AFFINITY_SOURCE must not be empty")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
