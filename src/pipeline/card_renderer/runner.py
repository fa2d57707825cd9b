"""Card Renderer Runner Module.

This module provides the programmatic entrypoints and logging configuration
for the render stage: spreadsheet → normalized records → card PDFs → ZIP
archive. It is the boundary API between CLI/service layers and the core
render logic; all work is delegated to ``data_loader``, ``normalizer``,
``renderer`` and ``archive``.

Notes
-----
All default paths, filenames and the log format come from ``src/config.py``.

Examples
--------
>>> from src.pipeline.card_renderer.runner import run_from_config, configure_logging
>>> configure_logging(log_level="INFO", enable_file=False)
>>> success = run_from_config(Path("cards.xlsx"))  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.config import (
    JOURNAL_FILENAME,
    LOG_DIR,
    LOG_FILENAME_GENERATE_CARDS,
    LOG_FORMAT,
    LOGOS_DIR,
    OUTPUT_DIR,
    TEMPLATES_DIR,
)

from .archive import build_archive, find_archive_files, find_card_files
from .config import RenderConfig
from .data_loader import load_rows_from_spreadsheet
from .normalizer import DroppedRow, normalize_rows
from .renderer import CardRenderer, ProgressCallback, RenderedCard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one render pipeline run."""

    cards: list[RenderedCard]
    dropped: list[DroppedRow]
    archive_path: Path


def configure_logging(log_level: str = "INFO", enable_file: bool = True) -> None:
    r"""Configure logging for card generation.

    Sets up a stream handler and, optionally, a file handler in ``LOG_DIR``
    using ``LOG_FORMAT``. File handler creation errors are ignored so a
    read-only checkout can still run. Existing root handlers are replaced,
    which makes the call idempotent.

    Parameters
    ----------
    log_level : str, optional
        The logging level (e.g., "INFO", "DEBUG"). Defaults to "INFO".
    enable_file : bool, optional
        Whether to also log to ``LOG_DIR / LOG_FILENAME_GENERATE_CARDS``.
    """
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(
                0,
                logging.FileHandler(LOG_DIR / LOG_FILENAME_GENERATE_CARDS, mode="a"),
            )
        except Exception:
            pass
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def clear_previous_outputs(
    working_dir: Path,
    include_category: bool,
    journal_filename: str = JOURNAL_FILENAME,
) -> int:
    """Remove what a previous run left; return how many files were removed.

    Card PDFs, timestamped archives and the combined journal are removed, so
    none of them can be mistaken for output of the new batch. Other files in
    the working directory are left alone.
    """
    working_dir = Path(working_dir)
    stale = find_card_files(working_dir, include_category) + find_archive_files(
        working_dir
    )
    journal = working_dir / journal_filename
    if journal.is_file():
        stale.append(journal)
    for path in stale:
        path.unlink()
    if stale:
        logger.info(f"Removed {len(stale)} files from a previous run in {working_dir}")
    return len(stale)


def generate_cards(
    spreadsheet: Path,
    working_dir: Path,
    template_dir: Path = TEMPLATES_DIR,
    logo_dir: Path = LOGOS_DIR,
    on_progress: ProgressCallback | None = None,
    config: Any = None,
    browser: Any = None,
    clear_previous: bool = True,
) -> GenerationResult:
    """Run the full render pipeline for one spreadsheet.

    Parameters
    ----------
    spreadsheet : Path
        ``.xlsx``/``.xls``/``.csv`` file with one card per row.
    working_dir : Path
        Session working directory receiving card PDFs and the archive.
    template_dir, logo_dir : Path, optional
        Asset directories; default to the project ``templates``/``logos``.
    on_progress : ProgressCallback or None, optional
        Receives a :class:`RenderProgress` after each written card.
    config : Any, optional
        Render settings; defaults to :class:`RenderConfig` from the environment.
    browser : Any, optional
        Pre-launched Playwright browser, mainly for tests.
    clear_previous : bool, optional
        Remove card PDFs, archives and the journal of an earlier run before
        rendering.

    Returns
    -------
    GenerationResult
        Written cards, dropped rows and the archive path.

    Raises
    ------
    src.exceptions.AppError
        Any stage failure (input, configuration, render, archive).
    """
    config = config if config is not None else RenderConfig()
    working_dir = Path(working_dir)
    include_category = bool(getattr(config, "include_category_in_filename", True))
    records, dropped = normalize_rows(load_rows_from_spreadsheet(Path(spreadsheet)))
    logger.info(f"Normalized {len(records)} records ({len(dropped)} rows dropped)")
    renderer = CardRenderer(config, template_dir, logo_dir, working_dir)
    if clear_previous:
        clear_previous_outputs(
            working_dir,
            include_category,
            getattr(config, "journal_filename", JOURNAL_FILENAME),
        )
    cards = asyncio.run(renderer.render_all(records, on_progress, browser))
    archive_path = build_archive(working_dir, include_category=include_category)
    return GenerationResult(cards=cards, dropped=dropped, archive_path=archive_path)


def run_from_config(
    spreadsheet: Path,
    working_dir: Path | None = None,
    template_dir: Path | None = None,
    logo_dir: Path | None = None,
    on_progress: ProgressCallback | None = None,
) -> bool:
    """Generate cards using provided paths or defaults from config.

    Returns
    -------
    bool
        True when cards and archive were written, False on any failure
        (the failure is logged).
    """
    try:
        result = generate_cards(
            Path(spreadsheet),
            Path(working_dir) if working_dir is not None else OUTPUT_DIR,
            Path(template_dir) if template_dir is not None else TEMPLATES_DIR,
            Path(logo_dir) if logo_dir is not None else LOGOS_DIR,
            on_progress=on_progress,
        )
        logger.info(
            "Generated %d cards, archive at %s", len(result.cards), result.archive_path
        )
        return True
    except Exception as exc:
        logger.exception("Failed to generate cards: %s", exc)
        return False


__all__ = [
    "GenerationResult",
    "clear_previous_outputs",
    "configure_logging",
    "generate_cards",
    "run_from_config",
]
