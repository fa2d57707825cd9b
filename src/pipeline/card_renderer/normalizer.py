"""Map raw spreadsheet rows to canonical card records.

The normalizer is a pure mapping: it never raises for a bad row. A row whose
type cannot be recognised becomes a :class:`DroppedRow` carrying the reason,
so one bad row never aborts the batch.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from src.config import BLANK_LOGO_FILENAME, DEFAULT_CATEGORY

from .data_loader import get_field

logger = logging.getLogger(__name__)

DISPLAY_FIELDS: tuple[str, ...] = (
    "text",
    "value",
    "coupon",
    "legal",
    "region",
    "segment",
)


@dataclass(frozen=True)
class CanonicalRecord:
    """One input row after normalization."""

    order: str
    type_tag: str
    category: str
    row_number: int
    fields: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        return self.fields.get(name, "")


@dataclass(frozen=True)
class DroppedRow:
    """A row that was not turned into a record, with the reason why."""

    row_number: int
    reason: str


def strip_diacritics(text: str) -> str:
    """Remove combining marks after NFD decomposition.

    >>> strip_diacritics("PROMOÇÃO")
    'PROMOCAO'
    """
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_type(raw_type: str) -> str:
    """Resolve a free-text type to its canonical tag, or ``""``.

    >>> normalize_type(" Promoção ")
    'promocao'
    >>> normalize_type("BC")
    'bc'
    >>> normalize_type("abc")
    ''
    """
    if not raw_type:
        return ""
    normalized = strip_diacritics(str(raw_type).lower().strip())
    if "promo" in normalized:
        return "promocao"
    if "cupom" in normalized:
        return "cupom"
    if "queda" in normalized:
        return "queda"
    if normalized == "bc":
        return "bc"
    return ""


def normalize_row(row: dict[str, str], row_number: int) -> CanonicalRecord | DroppedRow:
    """Normalize a single row.

    Parameters
    ----------
    row : dict[str, str]
        Raw row as produced by the data loader.
    row_number : int
        1-based position of the row among the data rows; used as the default
        order and for diagnostics.

    Returns
    -------
    CanonicalRecord | DroppedRow
        The canonical record, or the reason the row was dropped.
    """
    raw_type = get_field(row, "type")
    type_tag = normalize_type(raw_type)
    if not type_tag:
        return DroppedRow(row_number, f"unrecognized type {raw_type!r}")
    fields = {name: get_field(row, name) for name in DISPLAY_FIELDS}
    fields["logo"] = get_field(row, "logo") or BLANK_LOGO_FILENAME
    return CanonicalRecord(
        order=get_field(row, "order") or str(row_number),
        type_tag=type_tag,
        category=get_field(row, "category") or DEFAULT_CATEGORY,
        row_number=row_number,
        fields=fields,
    )


def normalize_rows(
    rows: Iterable[dict[str, str]],
) -> tuple[list[CanonicalRecord], list[DroppedRow]]:
    """Normalize a batch of rows, logging every dropped row."""
    records: list[CanonicalRecord] = []
    dropped: list[DroppedRow] = []
    for row_number, row in enumerate(rows, start=1):
        result = normalize_row(row, row_number)
        if isinstance(result, DroppedRow):
            logger.warning(f"Row {result.row_number}: {result.reason}, skipping.")
            dropped.append(result)
        else:
            records.append(result)
    return records, dropped
