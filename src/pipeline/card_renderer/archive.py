"""Bundle rendered card PDFs into one ZIP archive.

The archive is the terminal step of the render pipeline. It is written under
a temporary name and renamed once complete, so callers never see a partial
archive at the returned path.
"""

from __future__ import annotations

import logging
import os
import re
import zipfile
from datetime import datetime
from pathlib import Path

from src.config import (
    ARCHIVE_COMPRESSION_LEVEL,
    ARCHIVE_TIMESTAMP_FORMAT,
    INCLUDE_CATEGORY_IN_FILENAME,
    PARTIAL_FILE_SUFFIX,
)
from src.exceptions import ArchiveError

from .filenames import is_card_filename

logger = logging.getLogger(__name__)

_TIMESTAMPED_ARCHIVE = re.compile(r"^\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.zip$")


def timestamped_archive_name(now: datetime | None = None) -> str:
    """Return ``YYYY-MM-DD_HH-MM-SS.zip`` for the given (or current) time.

    >>> from datetime import datetime
    >>> timestamped_archive_name(datetime(2024, 3, 5, 9, 7, 1))
    '2024-03-05_09-07-01.zip'
    """
    return f"{(now or datetime.now()).strftime(ARCHIVE_TIMESTAMP_FORMAT)}.zip"


def find_card_files(
    working_dir: Path, include_category: bool = INCLUDE_CATEGORY_IN_FILENAME
) -> list[Path]:
    """Return card PDFs in ``working_dir`` sorted by name.

    The combined journal, archives and temporary files never match the card
    filename pattern and are therefore excluded.
    """
    working_dir = Path(working_dir)
    if not working_dir.is_dir():
        return []
    return sorted(
        path
        for path in working_dir.iterdir()
        if path.is_file()
        and is_card_filename(path.name, include_category=include_category)
    )


def find_archive_files(working_dir: Path) -> list[Path]:
    """Return archives named by :func:`timestamped_archive_name`, sorted by name."""
    working_dir = Path(working_dir)
    if not working_dir.is_dir():
        return []
    return sorted(
        path
        for path in working_dir.iterdir()
        if path.is_file() and _TIMESTAMPED_ARCHIVE.match(path.name)
    )


def build_archive(
    working_dir: Path,
    dest_path: Path | None = None,
    include_category: bool = INCLUDE_CATEGORY_IN_FILENAME,
) -> Path:
    """Write every card PDF of ``working_dir`` into a ZIP archive.

    Parameters
    ----------
    working_dir : Path
        Directory holding the rendered card PDFs.
    dest_path : Path or None, optional
        Archive path; defaults to a timestamped name inside ``working_dir``.
    include_category : bool, optional
        Filename schema used by the renderer.

    Returns
    -------
    Path
        Path of the complete archive.

    Raises
    ------
    ArchiveError
        If no card files exist or the archive cannot be written.
    """
    working_dir = Path(working_dir)
    cards = find_card_files(working_dir, include_category)
    if not cards:
        raise ArchiveError(
            f"no cards found in {working_dir}", context={"dir": str(working_dir)}
        )
    dest_path = Path(dest_path) if dest_path else working_dir / timestamped_archive_name()
    partial_path = dest_path.with_name(dest_path.name + PARTIAL_FILE_SUFFIX)
    try:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(
            partial_path,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=ARCHIVE_COMPRESSION_LEVEL,
        ) as archive:
            for card in cards:
                archive.write(card, arcname=card.name)
        os.replace(partial_path, dest_path)
    except OSError as exc:
        if partial_path.exists():
            partial_path.unlink()
        raise ArchiveError(
            f"Failed to write archive {dest_path}: {exc}",
            context={"dest": str(dest_path)},
        ) from exc
    logger.info(f"Archived {len(cards)} cards into {dest_path}")
    return dest_path
