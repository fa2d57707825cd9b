"""Compose the journal PDF from a working directory of rendered cards.

Headless runner for the composition stage, intended for programmatic
invocation from the CLI or a service layer. It can be re-run on the same
working directory at any time without re-rendering the cards.

Usage Examples
--------------
Typical programmatic usage with config defaults::

    from src.pipeline.journal_composer.runner import run_from_config
    result = run_from_config()
    assert result is True

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from src.config import LOG_DIR, LOG_FILENAME_COMPOSE_JOURNAL, LOG_FORMAT, OUTPUT_DIR

from .composer import JournalComposer

logger = logging.getLogger(__name__)


def configure_logging(log_level: str = "INFO", enable_file: bool = True) -> None:
    """Configure console and optional file logging for journal composition."""
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(
                0,
                logging.FileHandler(LOG_DIR / LOG_FILENAME_COMPOSE_JOURNAL, mode="a"),
            )
        except Exception:
            pass
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def compose_journal(
    working_dir: Path, output_file: Path | None = None, config: Any = None
) -> Path:
    """Compose the journal for ``working_dir`` and return its path.

    Raises
    ------
    src.exceptions.AppError
        If composition fails; no journal is left at the output path.
    """
    return JournalComposer(config).compose(Path(working_dir), output_file)


def run_from_config(
    working_dir: Path | None = None,
    output_file: Path | None = None,
) -> bool:
    """Compose the journal using provided paths or defaults from config.

    Parameters
    ----------
    working_dir : pathlib.Path or None, optional
        Directory holding rendered cards. Defaults to ``OUTPUT_DIR``.
    output_file : pathlib.Path or None, optional
        Destination of the journal. Defaults to the configured journal
        filename inside ``working_dir``.

    Returns
    -------
    bool
        ``True`` if the journal was written; ``False`` if an error occurred
        (all errors are logged).
    """
    working_dir = Path(working_dir) if working_dir is not None else OUTPUT_DIR
    try:
        path = compose_journal(working_dir, output_file)
        logger.info("Journal written to %s", path)
        return True
    except Exception:
        logger.exception("Failed to compose journal")
        return False


__all__ = ["compose_journal", "configure_logging", "run_from_config"]
