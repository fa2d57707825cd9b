"""Card Journal Pipeline package.

This module serves as the root of the Card Journal Pipeline Python package,
which transforms spreadsheet rows describing promotions into individually
rendered single-card PDF documents, bundles them into a ZIP archive, and
composes them into one paginated journal grouped by category.

The package keeps a layered architecture: thin CLI entrypoints
(`program1_generate_cards.py`, `program2_compose_journal.py`), headless
pipeline stages under `pipeline/`, and shared configuration and errors.

Package Structure
-----------------
- `pipeline/card_renderer/`:
    Spreadsheet loading, record normalization, HTML templating, headless
    browser rendering, card filename encoding and the ZIP archive builder.
- `pipeline/journal_composer/`:
    Ordering, category grouping, pagination, banner colours and PDF
    composition of the final journal.
- `sessions.py`: Per-session working directories for service layers.
- `config.py`: All configuration constants (paths, sizes, defaults), as UPPER_SNAKE_CASE.
- `exceptions.py`: The project-specific exception hierarchy.

Examples
--------
Basic import pattern:

>>> import src
>>> # See the program entrypoints or the stage runners.

"""
