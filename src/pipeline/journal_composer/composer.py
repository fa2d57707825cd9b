"""JournalComposer: lay rendered cards out into one paginated journal PDF.

The composer reads the card PDFs back from the working directory, orders and
groups them by category, and builds one composite page per
(category, capacity-sized chunk). Each page gets a coloured banner and a
fixed grid of cards. Card pages are merged into the composite page with a
scale-and-translate transformation, so their vector content is reused rather
than rasterised.

The composer only runs on complete, stable card files and can be re-run at
any time without re-rendering. Colours are assigned afresh on every run.

Examples
--------
>>> from pathlib import Path
>>> from src.pipeline.journal_composer.composer import JournalComposer
>>> path = JournalComposer().compose(Path("output"))  # doctest: +SKIP
"""

from __future__ import annotations

import io
import logging
import os
import random
from pathlib import Path
from typing import Any

from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from pypdf.errors import PyPdfError

from src.config import PARTIAL_FILE_SUFFIX
from src.exceptions import CompositionError, CompositionInputError

from .banner import render_banner_overlay, resolve_font
from .colors import Color, ColorRegistry
from .config import JournalConfig
from .layout import (
    PageGeometry,
    PagePlan,
    Rect,
    group_by_category,
    list_card_entries,
    paginate,
    sort_cards,
)

logger = logging.getLogger(__name__)


def fit_transformation(source: PageObject, cell: Rect) -> Transformation:
    """Transformation placing ``source`` centred in ``cell``, aspect preserved."""
    box = source.mediabox
    width = float(box.width)
    height = float(box.height)
    scale = min(cell.width / width, cell.height / height)
    offset_x = cell.x + (cell.width - width * scale) / 2
    offset_y = cell.y + (cell.height - height * scale) / 2
    return (
        Transformation()
        .translate(-float(box.left), -float(box.bottom))
        .scale(scale, scale)
        .translate(offset_x, offset_y)
    )


class JournalComposer:
    """Compose the card PDFs of a working directory into one journal.

    Parameters
    ----------
    config : Any, optional
        Object with the attributes of :class:`JournalConfig`; read from the
        environment when omitted.
    """

    def __init__(self, config: Any = None) -> None:
        self.config = config if config is not None else JournalConfig()

    @property
    def include_category(self) -> bool:
        return bool(getattr(self.config, "include_category_in_filename", True))

    def geometry(self) -> PageGeometry:
        return PageGeometry(
            columns=int(self.config.columns),
            card_width=float(self.config.card_width),
            gap=float(self.config.gap),
            margin=float(self.config.margin),
            banner_height=float(self.config.banner_height),
        )

    def plan(self, working_dir: Path) -> list[PagePlan]:
        """Order, group and paginate the cards of ``working_dir``.

        Raises
        ------
        CompositionInputError
            If the directory holds no card files.
        """
        working_dir = Path(working_dir)
        entries = list_card_entries(working_dir, include_category=self.include_category)
        if not entries:
            raise CompositionInputError(
                f"no cards found in {working_dir}", context={"dir": str(working_dir)}
            )
        groups = group_by_category(sort_cards(entries))
        return paginate(
            groups, int(self.config.cards_per_page), int(self.config.columns)
        )

    def new_color_registry(self) -> ColorRegistry:
        seed = getattr(self.config, "color_seed", None)
        return ColorRegistry(
            rng=random.Random(seed) if seed is not None else None,
            strategy=getattr(self.config, "color_strategy", "random"),
        )

    def compose(self, working_dir: Path, output_path: Path | None = None) -> Path:
        """Build the journal and return its path.

        Parameters
        ----------
        working_dir : Path
            Directory holding the card PDFs.
        output_path : Path or None, optional
            Destination; defaults to ``config.output_filename`` inside
            ``working_dir``.

        Returns
        -------
        Path
            Path of the complete journal PDF.

        Raises
        ------
        CompositionInputError
            If there are no cards, a card cannot be read, or the banner font
            is missing. Nothing is written in that case.
        CompositionError
            If the journal file cannot be written.
        """
        working_dir = Path(working_dir)
        pages = self.plan(working_dir)
        font_name = resolve_font(getattr(self.config, "font_path", None))
        geometry = self.geometry()
        registry = self.new_color_registry()
        readers: dict[Path, PdfReader] = {}

        writer = PdfWriter()
        for plan in pages:
            color = registry.color_for(plan.category)
            writer.add_page(self._build_page(plan, geometry, color, font_name, readers))

        if output_path is None:
            output_path = working_dir / self.config.output_filename
        output_path = Path(output_path)
        partial_path = output_path.with_name(output_path.name + PARTIAL_FILE_SUFFIX)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with partial_path.open("wb") as fh:
                writer.write(fh)
            os.replace(partial_path, output_path)
        except OSError as exc:
            if partial_path.exists():
                partial_path.unlink()
            raise CompositionError(
                f"Failed to write journal {output_path}: {exc}",
                context={"output": str(output_path)},
            ) from exc
        logger.info(
            f"Composed {len(pages)} pages for {len(registry)} categories into {output_path}"
        )
        return output_path

    def _card_page(self, path: Path, readers: dict[Path, PdfReader]) -> PageObject:
        try:
            if path not in readers:
                readers[path] = PdfReader(path)
            return readers[path].pages[0]
        except (OSError, IndexError, PyPdfError) as exc:
            raise CompositionInputError(
                f"Cannot read card {path.name}: {exc}", context={"card": str(path)}
            ) from exc

    def _build_page(
        self,
        plan: PagePlan,
        geometry: PageGeometry,
        color: Color,
        font_name: str,
        readers: dict[Path, PdfReader],
    ) -> PageObject:
        page_height = geometry.page_height(plan.rows)
        page = PageObject.create_blank_page(width=geometry.page_width, height=page_height)
        banner = render_banner_overlay(
            plan.category, color, geometry, page_height, font_name
        )
        page.merge_page(PdfReader(io.BytesIO(banner)).pages[0])
        for index, entry in enumerate(plan.cards):
            source = self._card_page(entry.path, readers)
            cell = geometry.cell_rect(index, page_height)
            page.merge_transformed_page(source, fit_transformation(source, cell))
        return page
