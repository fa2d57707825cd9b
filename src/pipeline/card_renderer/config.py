"""Runtime configuration for the card renderer.

Values come from environment variables, optionally provided by a ``.env``
file at the project root, with defaults from ``src/config.py``.

Examples
--------
>>> from src.pipeline.card_renderer.config import RenderConfig
>>> cfg = RenderConfig()
>>> assert cfg.card_width > 0
"""

import os
from pathlib import Path

from dotenv import load_dotenv

import src.config as _project_config
from src.config import (
    CARD_HEIGHT_PX,
    CARD_WIDTH_PX,
    DEFAULT_MAX_CONCURRENT_PAGES,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    INCLUDE_CATEGORY_IN_FILENAME,
    JOURNAL_FILENAME,
)
from src.exceptions import ConfigurationError


def env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable (``1/true/yes/on``)."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_project_env() -> None:
    """Load the project ``.env`` if present; the file wins over the process env."""
    env_path = Path(_project_config.PROJECT_ROOT) / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=True)


class RenderConfig:
    r"""Settings for rendering single-card documents.

    Attributes
    ----------
    card_width : int
        Page width in CSS pixels (``CARD_WIDTH``).
    card_height : int
        Page height in CSS pixels (``CARD_HEIGHT``).
    include_category_in_filename : bool
        Whether card filenames carry the category token
        (``INCLUDE_CATEGORY_IN_FILENAME``). Must match the composer.
    max_concurrent_pages : int
        Browser pages rendered at the same time (``MAX_CONCURRENT_PAGES``).
    navigation_timeout_ms : int
        Timeout for a page to reach network idle (``NAVIGATION_TIMEOUT_MS``).
    journal_filename : str
        Name of the combined journal, removed when a new batch is rendered
        (``JOURNAL_FILENAME``).

    Raises
    ------
    ConfigurationError
        If a numeric setting is not a positive integer.
    """

    def __init__(self) -> None:
        load_project_env()
        try:
            self.card_width = int(os.getenv("CARD_WIDTH", CARD_WIDTH_PX))
            self.card_height = int(os.getenv("CARD_HEIGHT", CARD_HEIGHT_PX))
            self.max_concurrent_pages = int(
                os.getenv("MAX_CONCURRENT_PAGES", DEFAULT_MAX_CONCURRENT_PAGES)
            )
            self.navigation_timeout_ms = int(
                os.getenv("NAVIGATION_TIMEOUT_MS", DEFAULT_NAVIGATION_TIMEOUT_MS)
            )
        except ValueError as exc:
            raise ConfigurationError(f"Invalid render setting: {exc}") from exc
        self.include_category_in_filename = env_flag(
            "INCLUDE_CATEGORY_IN_FILENAME", INCLUDE_CATEGORY_IN_FILENAME
        )
        self.journal_filename = os.getenv("JOURNAL_FILENAME", JOURNAL_FILENAME)
        if min(self.card_width, self.card_height, self.max_concurrent_pages) <= 0:
            raise ConfigurationError(
                "CARD_WIDTH, CARD_HEIGHT and MAX_CONCURRENT_PAGES must be positive"
            )
