"""Program 2: Journal composition.

Composes the cards already rendered into a working directory into one
journal PDF, grouped by category under coloured banners. Can be re-run
without re-rendering the cards.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from src.config import OUTPUT_DIR
from src.exceptions import AppError
from src.pipeline.journal_composer.config import JournalConfig
from src.pipeline.journal_composer.runner import compose_journal, configure_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for journal composition; returns the process exit code."""
    parser = argparse.ArgumentParser(
        description="Compose rendered cards into one journal PDF."
    )
    parser.add_argument("--working-dir", type=Path, default=OUTPUT_DIR)
    parser.add_argument("--output", type=Path, default=None)
    parser.add_argument("--cards-per-page", type=int, default=None)
    parser.add_argument("--log-level", type=str, default="INFO")
    args = parser.parse_args(argv)
    configure_logging(
        args.log_level, enable_file=not bool(os.environ.get("DISABLE_FILE_LOGS"))
    )
    try:
        config = JournalConfig()
        if args.cards_per_page is not None:
            config.cards_per_page = args.cards_per_page
        path = compose_journal(args.working_dir, args.output, config)
    except AppError as exc:
        logger.error("Journal composition failed: %s", exc)
        return 1
    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
