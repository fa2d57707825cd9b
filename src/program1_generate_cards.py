"""Program 1: Card generation from a spreadsheet.

Reads promotion rows from a spreadsheet, renders one PDF card per valid row
with a headless browser, and bundles the cards into a ZIP archive. Progress
is shown as a Rich progress bar.

Usage
-----
python -m src.program1_generate_cards --input cards.xlsx [--working-dir ...]
    [--session ...] [--templates ...] [--logos ...] [--log-level ...]

Notes
-----
With ``--session`` the cards go to a per-session directory under
``SESSIONS_DIR`` which is cleared first; otherwise to ``--working-dir``.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from src.config import LOGOS_DIR, OUTPUT_DIR, TEMPLATES_DIR
from src.exceptions import AppError
from src.pipeline.card_renderer.renderer import RenderProgress
from src.pipeline.card_renderer.runner import configure_logging, generate_cards
from src.sessions import SessionStore

logger = logging.getLogger(__name__)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render one PDF card per spreadsheet row and archive them."
    )
    parser.add_argument("--input", type=Path, required=True)
    parser.add_argument("--working-dir", type=Path, default=OUTPUT_DIR)
    parser.add_argument("--session", type=str, default=None)
    parser.add_argument("--templates", type=Path, default=TEMPLATES_DIR)
    parser.add_argument("--logos", type=Path, default=LOGOS_DIR)
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for card generation; returns the process exit code."""
    args = parse_arguments(argv)
    configure_logging(
        args.log_level, enable_file=not bool(os.environ.get("DISABLE_FILE_LOGS"))
    )
    console = Console()

    with Progress(
        TextColumn("[bold]Cards"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("", total=None)

        def on_progress(update: RenderProgress) -> None:
            progress.update(
                task,
                total=update.total,
                completed=update.processed,
                description=update.current_card,
            )

        try:
            working_dir = args.working_dir
            if args.session:
                working_dir = SessionStore().reset(args.session)
            result = generate_cards(
                args.input,
                working_dir,
                args.templates,
                args.logos,
                on_progress=on_progress,
            )
        except AppError as exc:
            logger.error("Card generation failed: %s", exc)
            return 1

    console.print(
        f"Rendered {len(result.cards)} cards "
        f"({len(result.dropped)} rows skipped), archive: {result.archive_path}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
