"""Ordering, grouping, pagination and page geometry for the journal.

Everything here is pure arithmetic over card filenames; no PDF is opened.
Coordinates follow the PDF convention: origin at the bottom-left corner,
y growing upwards.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from src.config import (
    CARD_HEIGHT_PX,
    CARD_WIDTH_PX,
    JOURNAL_BANNER_HEIGHT,
    JOURNAL_CARD_WIDTH,
    JOURNAL_COLUMNS,
    JOURNAL_GAP,
    JOURNAL_MARGIN,
)
from src.exceptions import ConfigurationError
from src.pipeline.card_renderer.archive import find_card_files
from src.pipeline.card_renderer.filenames import decode_card_filename

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^-?\d+(?:\.\d+)?")
_DUPLICATE_SUFFIX = re.compile(r"^-(\d+)$")


@dataclass(frozen=True)
class CardEntry:
    """A card PDF found in the working directory."""

    path: Path
    order: str
    type_tag: str
    category: str


@dataclass
class CategoryGroup:
    """A contiguous run of cards sharing one category, in final order."""

    category: str
    cards: list[CardEntry] = field(default_factory=list)


@dataclass(frozen=True)
class PagePlan:
    """The cards placed on one composite page under one banner."""

    category: str
    cards: tuple[CardEntry, ...]
    rows: int
    index_in_group: int


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


def order_key(order: str) -> tuple[float, int]:
    """Sort key of an order token; non-numeric orders sort last.

    The second element is the duplicate counter the renderer appends as
    ``-<n>``, so a repeated order stays in row sequence.

    >>> order_key("12")
    (12.0, 0)
    >>> order_key("3-2")
    (3.0, 2)
    >>> order_key("x")
    (inf, 0)
    """
    token = order.strip()
    match = _LEADING_NUMBER.match(token)
    if not match:
        return (math.inf, 0)
    duplicate = _DUPLICATE_SUFFIX.match(token[match.end() :])
    return (float(match.group(0)), int(duplicate.group(1)) if duplicate else 0)


def list_card_entries(working_dir: Path, *, include_category: bool) -> list[CardEntry]:
    """Return the cards of ``working_dir`` in sorted-name order."""
    entries: list[CardEntry] = []
    for path in find_card_files(working_dir, include_category):
        decoded = decode_card_filename(path.name, include_category=include_category)
        if decoded is None:
            continue
        entries.append(
            CardEntry(
                path=path,
                order=decoded.order,
                type_tag=decoded.type_tag,
                category=decoded.category,
            )
        )
    return entries


def sort_cards(entries: Iterable[CardEntry]) -> list[CardEntry]:
    """Sort ascending by order; ties keep their listing order."""
    return sorted(entries, key=lambda entry: order_key(entry.order))


def group_by_category(entries: Iterable[CardEntry]) -> list[CategoryGroup]:
    """Split sorted cards into contiguous single-category groups.

    A category change always closes the current group, whatever its size, so
    a banner never sits above another category's cards. A category that
    reappears later in the order starts a new group.
    """
    groups: list[CategoryGroup] = []
    for entry in entries:
        if not groups or groups[-1].category != entry.category:
            groups.append(CategoryGroup(entry.category))
        groups[-1].cards.append(entry)
    return groups


def paginate(
    groups: Sequence[CategoryGroup],
    cards_per_page: int,
    columns: int = JOURNAL_COLUMNS,
) -> list[PagePlan]:
    """Split each group into pages of at most ``cards_per_page`` cards."""
    if cards_per_page < 1 or columns < 1:
        raise ConfigurationError("cards_per_page and columns must be at least 1")
    pages: list[PagePlan] = []
    for group in groups:
        for index, start in enumerate(range(0, len(group.cards), cards_per_page)):
            chunk = tuple(group.cards[start : start + cards_per_page])
            pages.append(
                PagePlan(
                    category=group.category,
                    cards=chunk,
                    rows=math.ceil(len(chunk) / columns),
                    index_in_group=index,
                )
            )
    return pages


@dataclass(frozen=True)
class PageGeometry:
    """Fixed grid layout of a composite page, in PDF points."""

    columns: int = JOURNAL_COLUMNS
    card_width: float = JOURNAL_CARD_WIDTH
    card_aspect: float = CARD_HEIGHT_PX / CARD_WIDTH_PX
    gap: float = JOURNAL_GAP
    margin: float = JOURNAL_MARGIN
    banner_height: float = JOURNAL_BANNER_HEIGHT

    @property
    def card_height(self) -> float:
        return self.card_width * self.card_aspect

    @property
    def page_width(self) -> float:
        return (
            2 * self.margin
            + self.columns * self.card_width
            + (self.columns - 1) * self.gap
        )

    def page_height(self, rows: int) -> float:
        """Height of a page holding ``rows`` grid rows (at least one)."""
        rows = max(rows, 1)
        return (
            self.margin
            + self.banner_height
            + self.gap
            + rows * self.card_height
            + (rows - 1) * self.gap
            + self.margin
        )

    def banner_rect(self, page_height: float) -> Rect:
        return Rect(
            x=self.margin,
            y=page_height - self.margin - self.banner_height,
            width=self.page_width - 2 * self.margin,
            height=self.banner_height,
        )

    def cell_rect(self, index: int, page_height: float) -> Rect:
        """Rectangle of grid cell ``index``, filled left-to-right, top-to-bottom."""
        row, column = divmod(index, self.columns)
        top = (
            self.margin
            + self.banner_height
            + self.gap
            + row * (self.card_height + self.gap)
        )
        return Rect(
            x=self.margin + column * (self.card_width + self.gap),
            y=page_height - top - self.card_height,
            width=self.card_width,
            height=self.card_height,
        )
