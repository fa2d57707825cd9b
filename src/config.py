"""Global configuration constants for the project.

Defines paths, filenames and layout defaults used across the card renderer,
the archive builder and the journal composer.
"""

from __future__ import annotations

from pathlib import Path

# Project directories
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
LOG_DIR: Path = PROJECT_ROOT / "logs"

# Input assets
TEMPLATES_DIR: Path = PROJECT_ROOT / "templates"
LOGOS_DIR: Path = PROJECT_ROOT / "logos"
BLANK_LOGO_FILENAME: str = "blank.png"

# Working directories
OUTPUT_DIR: Path = PROJECT_ROOT / "output"
SESSIONS_DIR: Path = OUTPUT_DIR / "sessions"
PARTIAL_FILE_SUFFIX: str = ".part"

# Spreadsheet input
SUPPORTED_SPREADSHEET_SUFFIXES: tuple[str, ...] = (".xlsx", ".xls", ".csv")
CSV_DELIMITER: str = ";"

# Canonical card types and the fields rendered into their templates
CARD_TYPES: tuple[str, ...] = ("promocao", "cupom", "queda", "bc")
PERCENT_CARD_TYPES: frozenset[str] = frozenset({"cupom", "queda", "bc"})
DEFAULT_CATEGORY: str = "UNCATEGORIZED"

# Field name -> accepted column headers (lower-case), first match wins
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "order": ("ordem", "order"),
    "type": ("tipo", "type"),
    "category": ("categoria", "category"),
    "text": ("texto", "text"),
    "value": ("valor", "value"),
    "coupon": ("cupom", "coupon"),
    "legal": ("legal", "legal_text"),
    "region": ("uf", "region"),
    "segment": ("segmento", "segment"),
    "logo": ("logo", "logo_reference"),
}

# Card rendering defaults (CSS pixels)
CARD_WIDTH_PX: int = 1400
CARD_HEIGHT_PX: int = 2115
DEFAULT_MAX_CONCURRENT_PAGES: int = 1
DEFAULT_NAVIGATION_TIMEOUT_MS: int = 30000
BROWSER_LAUNCH_ARGS: list[str] = ["--no-sandbox", "--disable-setuid-sandbox"]
INCLUDE_CATEGORY_IN_FILENAME: bool = True

# Archive
ARCHIVE_TIMESTAMP_FORMAT: str = "%Y-%m-%d_%H-%M-%S"
ARCHIVE_COMPRESSION_LEVEL: int = 9

# Journal layout defaults (PDF points)
JOURNAL_FILENAME: str = "journal.pdf"
JOURNAL_CARDS_PER_PAGE: int = 15
JOURNAL_COLUMNS: int = 3
JOURNAL_CARD_WIDTH: float = 400.0
JOURNAL_GAP: float = 20.0
JOURNAL_MARGIN: float = 40.0
JOURNAL_BANNER_HEIGHT: float = 90.0
JOURNAL_BANNER_RADIUS: float = 18.0
JOURNAL_BANNER_FONT: str = "Helvetica-Bold"
JOURNAL_BANNER_MIN_FONT_SIZE: float = 8.0
JOURNAL_COLOR_STRATEGY: str = "random"
JOURNAL_MAX_RANDOM_COLOR_ATTEMPTS: int = 64

# Logging
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME_GENERATE_CARDS: str = "generate_cards.log"
LOG_FILENAME_COMPOSE_JOURNAL: str = "compose_journal.log"
