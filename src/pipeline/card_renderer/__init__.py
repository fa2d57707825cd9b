"""Card renderer pipeline package.

This package turns spreadsheet rows into single-card PDF documents and a ZIP
archive of them. It exposes the stable API surface of the render stage,
re-exporting helpers from its submodules:

- ``data_loader``: spreadsheet reading and field lookup.
- ``normalizer``: type recognition and field defaults.
- ``filenames``: the card filename encode/decode pair.
- ``templating``: placeholder substitution and value formatting.
- ``renderer``: headless browser rendering with progress reporting.
- ``archive``: the ZIP archive builder.

Examples
--------
>>> from src.pipeline.card_renderer import normalize_type
>>> normalize_type("PROMOÇÃO")
'promocao'
"""

from .archive import build_archive, find_card_files
from .config import RenderConfig
from .data_loader import get_field, load_rows_from_spreadsheet
from .filenames import CardFilename, decode_card_filename, encode_card_filename
from .normalizer import CanonicalRecord, DroppedRow, normalize_row, normalize_rows, normalize_type
from .renderer import CardRenderer, RenderedCard, RenderProgress
from .templating import build_card_context, format_value, render_template

__all__ = [
    "CanonicalRecord",
    "CardFilename",
    "CardRenderer",
    "DroppedRow",
    "RenderConfig",
    "RenderProgress",
    "RenderedCard",
    "build_archive",
    "build_card_context",
    "decode_card_filename",
    "encode_card_filename",
    "find_card_files",
    "format_value",
    "get_field",
    "load_rows_from_spreadsheet",
    "normalize_row",
    "normalize_rows",
    "normalize_type",
    "render_template",
]
