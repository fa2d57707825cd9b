"""Category banner drawing with ReportLab.

A banner is drawn on its own one-page PDF the size of the composite page;
the composer merges that overlay onto the page. The label is upper-cased,
centred, white, and set in the largest font size that fits the banner.
"""

from __future__ import annotations

import io
from pathlib import Path

from reportlab.lib.colors import white
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from src.config import (
    JOURNAL_BANNER_FONT,
    JOURNAL_BANNER_MIN_FONT_SIZE,
    JOURNAL_BANNER_RADIUS,
)
from src.exceptions import CompositionInputError

from .colors import Color
from .layout import PageGeometry

FONT_STEP = 0.5


def banner_label(category: str) -> str:
    """Display text for a category token.

    >>> banner_label("bebidas_geladas")
    'BEBIDAS GELADAS'
    """
    return " ".join(category.replace("_", " ").split()).upper()


def resolve_font(font_path: Path | str | None = None) -> str:
    """Return a usable font name, registering a TrueType file if given.

    Raises
    ------
    CompositionInputError
        If the font file is missing or cannot be loaded.
    """
    if not font_path:
        return JOURNAL_BANNER_FONT
    path = Path(font_path)
    if not path.is_file():
        raise CompositionInputError(
            f"Banner font not found: {path}", context={"font": str(path)}
        )
    font_name = path.stem
    if font_name not in pdfmetrics.getRegisteredFontNames():
        try:
            pdfmetrics.registerFont(TTFont(font_name, str(path)))
        except Exception as exc:
            raise CompositionInputError(
                f"Cannot load banner font {path}: {exc}", context={"font": str(path)}
            ) from exc
    return font_name


def fit_font_size(
    text: str,
    font_name: str,
    max_width: float,
    max_size: float,
    min_size: float = JOURNAL_BANNER_MIN_FONT_SIZE,
) -> float:
    """Largest font size, in ``FONT_STEP`` increments, whose text fits ``max_width``."""
    size = float(max_size)
    while size > min_size:
        if pdfmetrics.stringWidth(text, font_name, size) <= max_width:
            return size
        size -= FONT_STEP
    return float(min_size)


def render_banner_overlay(
    category: str,
    color: Color,
    geometry: PageGeometry,
    page_height: float,
    font_name: str = JOURNAL_BANNER_FONT,
) -> bytes:
    """Draw the banner for ``category`` and return a one-page PDF as bytes."""
    buffer = io.BytesIO()
    canv = canvas.Canvas(buffer, pagesize=(geometry.page_width, page_height))
    rect = geometry.banner_rect(page_height)
    radius = min(JOURNAL_BANNER_RADIUS, rect.height / 2)
    canv.setFillColorRGB(color[0] / 255, color[1] / 255, color[2] / 255)
    canv.roundRect(rect.x, rect.y, rect.width, rect.height, radius, stroke=0, fill=1)

    text = banner_label(category)
    padding = rect.height * 0.25
    size = fit_font_size(text, font_name, rect.width - 2 * padding, rect.height * 0.6)
    ascent, descent = pdfmetrics.getAscentDescent(font_name, size)
    baseline = rect.y + rect.height / 2 - (ascent + descent) / 2
    canv.setFillColor(white)
    canv.setFont(font_name, size)
    canv.drawCentredString(rect.x + rect.width / 2, baseline, text)
    canv.showPage()
    canv.save()
    return buffer.getvalue()
