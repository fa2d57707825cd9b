"""Runtime configuration for the journal composer.

Values come from environment variables (optionally from the project
``.env``), with defaults from ``src/config.py``.
"""

import os

from src.config import (
    INCLUDE_CATEGORY_IN_FILENAME,
    JOURNAL_BANNER_HEIGHT,
    JOURNAL_CARD_WIDTH,
    JOURNAL_CARDS_PER_PAGE,
    JOURNAL_COLOR_STRATEGY,
    JOURNAL_COLUMNS,
    JOURNAL_FILENAME,
    JOURNAL_GAP,
    JOURNAL_MARGIN,
)
from src.exceptions import ConfigurationError
from src.pipeline.card_renderer.config import env_flag, load_project_env


class JournalConfig:
    r"""Settings for composing the journal.

    Attributes
    ----------
    cards_per_page : int
        Page capacity before a category continues on a new page (``CARDS_PER_PAGE``).
    columns : int
        Grid columns (``JOURNAL_COLUMNS``).
    card_width, gap, margin, banner_height : float
        Layout sizes in PDF points.
    color_strategy : str
        ``"random"`` or ``"golden"`` (``COLOR_STRATEGY``).
    color_seed : int or None
        Seed for reproducible banner colours (``COLOR_SEED``).
    font_path : str or None
        Optional TrueType font for banners (``BANNER_FONT_PATH``).
    include_category_in_filename : bool
        Card filename schema; must match the renderer.
    output_filename : str
        Name of the combined journal inside the working directory.
    """

    def __init__(self) -> None:
        load_project_env()
        try:
            self.cards_per_page = int(os.getenv("CARDS_PER_PAGE", JOURNAL_CARDS_PER_PAGE))
            self.columns = int(os.getenv("JOURNAL_COLUMNS", JOURNAL_COLUMNS))
            self.card_width = float(os.getenv("JOURNAL_CARD_WIDTH", JOURNAL_CARD_WIDTH))
            self.gap = float(os.getenv("JOURNAL_GAP", JOURNAL_GAP))
            self.margin = float(os.getenv("JOURNAL_MARGIN", JOURNAL_MARGIN))
            self.banner_height = float(
                os.getenv("JOURNAL_BANNER_HEIGHT", JOURNAL_BANNER_HEIGHT)
            )
            seed = os.getenv("COLOR_SEED")
            self.color_seed = int(seed) if seed else None
        except ValueError as exc:
            raise ConfigurationError(f"Invalid journal setting: {exc}") from exc
        self.color_strategy = os.getenv("COLOR_STRATEGY", JOURNAL_COLOR_STRATEGY)
        self.font_path = os.getenv("BANNER_FONT_PATH") or None
        self.include_category_in_filename = env_flag(
            "INCLUDE_CATEGORY_IN_FILENAME", INCLUDE_CATEGORY_IN_FILENAME
        )
        self.output_filename = os.getenv("JOURNAL_FILENAME", JOURNAL_FILENAME)
        if self.cards_per_page < 1 or self.columns < 1:
            raise ConfigurationError("CARDS_PER_PAGE and JOURNAL_COLUMNS must be positive")
