"""Templating utilities for card HTML generation.

This module provides a stateless templating API for the card renderer. Its
sole responsibility is template file loading, placeholder extraction, field
formatting and context-driven substitution of ``{{NAME}}`` placeholders.

Boundaries
----------
- Does not write to disk; reads template and logo files only.
- Only string handling; does not interpret HTML. Values are substituted
  verbatim, without escaping.
- Deterministic given inputs.

Placeholders
------------
``{{TEXTO}}``, ``{{VALOR}}``, ``{{CUPOM}}``, ``{{LEGAL}}``, ``{{UF}}``,
``{{SEGMENTO}}`` and ``{{LOGO}}``.

Examples
--------
>>> from src.pipeline.card_renderer.templating import render_template
>>> render_template("<h1>{{VALOR}}</h1>", {"VALOR": "10%"})
'<h1>10%</h1>'
"""

import base64
import mimetypes
import re
from collections.abc import Mapping
from pathlib import Path

from src.config import PERCENT_CARD_TYPES

from .normalizer import CanonicalRecord

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Z_]+)\}\}")


def template_path_for(type_tag: str, template_dir: Path) -> Path:
    """Return the template path for a canonical type tag."""
    return Path(template_dir) / f"{type_tag}.html"


def load_template(path: Path) -> str:
    r"""Read the contents of a template file as a string.

    Parameters
    ----------
    path : Path
        Path to the template file to be loaded.

    Returns
    -------
    str
        Contents of the template file as a string.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    OSError
        If the file cannot be read due to permissions or disk errors.
    """
    with path.open("r", encoding="utf-8") as fh:
        return fh.read()


def extract_placeholders_from_template(content: str) -> list[str]:
    """Return a sorted list of unique ``{{NAME}}`` placeholders in the template."""
    return sorted(set(PLACEHOLDER_PATTERN.findall(content)))


def format_value(type_tag: str, value: str) -> str:
    """Normalize the value field for a card type.

    Percentage-bearing types always end in a single ``%``; the promotion type
    keeps the value verbatim.

    Examples
    --------
    >>> format_value("cupom", "10")
    '10%'
    >>> format_value("queda", "20 %")
    '20%'
    >>> format_value("promocao", "R$ 9,99")
    'R$ 9,99'
    """
    if type_tag not in PERCENT_CARD_TYPES:
        return value
    stripped = value.replace("%", "").strip()
    if not stripped:
        return ""
    return f"{stripped}%"


def logo_data_uri(logo_path: Path) -> str:
    """Read an image file and return it as an inline ``data:`` URI.

    Raises
    ------
    FileNotFoundError
        If the logo file does not exist.
    """
    mime_type = mimetypes.guess_type(logo_path.name)[0] or "application/octet-stream"
    encoded = base64.b64encode(logo_path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def build_card_context(record: CanonicalRecord, logo_uri: str) -> dict[str, str]:
    """Construct the placeholder mapping for one card.

    Coupon, value, legal, region and segment are upper-cased for emphasis;
    the free text is kept as typed.
    """
    return {
        "TEXTO": record.get("text"),
        "VALOR": format_value(record.type_tag, record.get("value")).upper(),
        "CUPOM": record.get("coupon").upper(),
        "LEGAL": record.get("legal").upper(),
        "UF": record.get("region").upper(),
        "SEGMENTO": record.get("segment").upper(),
        "LOGO": logo_uri,
    }


def render_template(template_content: str, context: Mapping[str, str]) -> str:
    """Replace each ``{{NAME}}`` found in ``context`` with its value.

    Placeholders without a context entry are left untouched.
    """

    def replace_func(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in context:
            return context[name]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace_func, template_content)
