"""Encode and decode single-card PDF filenames.

Filenames in the working directory are the only interchange format between
the render stage and the archive/journal stages::

    <order>_<TYPE>[_<CATEGORY>].pdf

Whether the category token is present is a deployment setting
(``INCLUDE_CATEGORY_IN_FILENAME``). Renderer and composer must agree on it;
it is never guessed from the files.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from src.config import CARD_TYPES, DEFAULT_CATEGORY

from .normalizer import strip_diacritics

CARD_SUFFIX = ".pdf"


@dataclass(frozen=True)
class CardFilename:
    """The fields recovered from a card filename."""

    order: str
    type_tag: str
    category: str


def sanitize_order(order: str) -> str:
    """Make an order value safe as the leading filename token.

    >>> sanitize_order(" 12 ")
    '12'
    >>> sanitize_order("3_b/c")
    '3-b-c'
    """
    cleaned = re.sub(r"[^A-Za-z0-9.\-]", "-", str(order).strip())
    return cleaned or "0"


def sanitize_category(category: str) -> str:
    """Upper-case a category and reduce it to ``[A-Z0-9_-]``.

    >>> sanitize_category("Bebidas geladas")
    'BEBIDAS_GELADAS'
    >>> sanitize_category("Açougue")
    'ACOUGUE'
    """
    upper = strip_diacritics(str(category)).upper().strip()
    upper = re.sub(r"\s+", "_", upper)
    upper = re.sub(r"[^A-Z0-9_\-]", "", upper)
    return upper or DEFAULT_CATEGORY


def encode_card_filename(
    order: str, type_tag: str, category: str, *, include_category: bool
) -> str:
    """Build the filename for one rendered card.

    >>> encode_card_filename("1", "promocao", "a", include_category=True)
    '1_PROMOCAO_A.pdf'
    >>> encode_card_filename("2", "cupom", "a", include_category=False)
    '2_CUPOM.pdf'
    """
    if type_tag not in CARD_TYPES:
        raise ValueError(f"Unknown card type: {type_tag!r}")
    parts = [sanitize_order(order), type_tag.upper()]
    if include_category:
        parts.append(sanitize_category(category))
    return "_".join(parts) + CARD_SUFFIX


def decode_card_filename(name: str, *, include_category: bool) -> CardFilename | None:
    """Parse a card filename; return ``None`` if the name is not a card.

    >>> decode_card_filename("3_CUPOM_B.pdf", include_category=True)
    CardFilename(order='3', type_tag='cupom', category='B')
    >>> decode_card_filename("journal.pdf", include_category=True) is None
    True
    """
    path = Path(name)
    if path.suffix.lower() != CARD_SUFFIX:
        return None
    max_split = 2 if include_category else 1
    parts = path.stem.split("_", max_split)
    if len(parts) < 2 or not parts[0]:
        return None
    type_tag = parts[1].lower()
    if type_tag not in CARD_TYPES:
        return None
    category = parts[2] if len(parts) == 3 and parts[2] else DEFAULT_CATEGORY
    return CardFilename(order=parts[0], type_tag=type_tag, category=category)


def is_card_filename(name: str, *, include_category: bool) -> bool:
    return decode_card_filename(name, include_category=include_category) is not None
