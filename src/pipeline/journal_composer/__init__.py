"""Journal composer pipeline package.

Exposes the composition stage: ordering and grouping of rendered cards,
pagination, banner colours and the PDF composer. All logic lives in the
submodules; this module only defines the import surface.

Examples
--------
>>> from src.pipeline.journal_composer import JournalComposer
>>> # JournalComposer().compose(Path("output/sessions/abc"))
"""

from .colors import ColorRegistry
from .composer import JournalComposer
from .config import JournalConfig
from .layout import (
    CardEntry,
    CategoryGroup,
    PageGeometry,
    PagePlan,
    group_by_category,
    list_card_entries,
    paginate,
    sort_cards,
)

__all__ = [
    "CardEntry",
    "CategoryGroup",
    "ColorRegistry",
    "JournalComposer",
    "JournalConfig",
    "PageGeometry",
    "PagePlan",
    "group_by_category",
    "list_card_entries",
    "paginate",
    "sort_cards",
]
