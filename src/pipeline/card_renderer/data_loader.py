"""Spreadsheet loader and value extraction utilities for card records.

This module reads the uploaded spreadsheet (first sheet of an Excel workbook,
or a semicolon-delimited CSV) and yields each row as a mapping of lower-cased
column names to cleaned string values. It performs no business logic: type
recognition and defaults live in ``normalizer.py``.

Column naming follows ``FIELD_ALIASES`` in ``src/config.py`` so Portuguese
headers (``ordem``, ``tipo``, ``valor``...) and English headers both resolve.

"""

import re
import zipfile
from collections.abc import Iterator
from pathlib import Path

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError

from src.config import CSV_DELIMITER, FIELD_ALIASES, SUPPORTED_SPREADSHEET_SUFFIXES
from src.exceptions import UserInputError


def read_spreadsheet(path: Path) -> pd.DataFrame:
    """Read a spreadsheet into a DataFrame of strings.

    Parameters
    ----------
    path : Path
        ``.xlsx``/``.xls`` workbook (first sheet is used) or ``.csv`` file.

    Returns
    -------
    pd.DataFrame
        Every cell as ``str``; blank cells are ``""``. Column names are
        stripped and lower-cased.

    Raises
    ------
    UserInputError
        If the file is missing, its extension is not supported, or its
        contents cannot be parsed as a spreadsheet.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SPREADSHEET_SUFFIXES:
        raise UserInputError(
            f"Unsupported spreadsheet '{path.name}': only "
            f"{', '.join(SUPPORTED_SPREADSHEET_SUFFIXES)} files are supported",
            context={"path": str(path)},
        )
    if not path.exists():
        raise UserInputError(
            f"Spreadsheet not found: {path}", context={"path": str(path)}
        )
    try:
        if suffix == ".csv":
            dataframe = pd.read_csv(
                path,
                sep=CSV_DELIMITER,
                dtype=str,
                keep_default_na=False,
                encoding="utf-8-sig",
            )
        else:
            dataframe = pd.read_excel(
                path, sheet_name=0, dtype=str, keep_default_na=False
            )
    except (
        ValueError,
        OSError,
        zipfile.BadZipFile,
        InvalidFileException,
        XLRDError,
    ) as exc:
        raise UserInputError(
            f"Cannot read spreadsheet '{path.name}': {exc}",
            context={"path": str(path)},
        ) from exc
    dataframe.columns = [str(column).strip().lower() for column in dataframe.columns]
    return dataframe.fillna("")


def load_rows_from_spreadsheet(path: Path) -> Iterator[dict[str, str]]:
    """Yield cleaned spreadsheet rows as dictionaries.

    Parameters
    ----------
    path : Path
        Spreadsheet accepted by :func:`read_spreadsheet`.

    Yields
    ------
    dict[str, str]
        Row with all values as stripped strings, in sheet order.

    Examples
    --------
    >>> from pathlib import Path
    >>> for row in load_rows_from_spreadsheet(Path("cards.xlsx")):  # doctest: +SKIP
    ...     print(row["tipo"])
    """
    dataframe = read_spreadsheet(path)
    for record in dataframe.to_dict(orient="records"):
        yield {str(key): str(value).strip() for key, value in record.items()}


def format_number_string(value: str) -> str:
    """Render float-looking integers without their fractional part.

    Spreadsheet engines hand back ``10.0`` for a cell typed as ``10``.

    Examples
    --------
    >>> format_number_string("10.0")
    '10'
    >>> format_number_string("10.5")
    '10.5'
    """
    if re.fullmatch(r"-?\d+\.0+", value):
        return value.split(".")[0]
    return value


def get_field(row: dict[str, str], field: str) -> str:
    """Return the cleaned value of a logical field, or ``""`` if absent.

    Parameters
    ----------
    row : dict[str, str]
        Row as yielded by :func:`load_rows_from_spreadsheet`.
    field : str
        Logical field name, a key of ``FIELD_ALIASES``.

    Returns
    -------
    str
        Value of the first alias column present with a non-empty value.

    Examples
    --------
    >>> get_field({"valor": "10.0"}, "value")
    '10'
    >>> get_field({}, "coupon")
    ''
    """
    for column in FIELD_ALIASES.get(field, (field,)):
        value = row.get(column)
        if value is None:
            continue
        cleaned = str(value).strip()
        if cleaned.lower() == "nan":
            cleaned = ""
        if cleaned:
            return format_number_string(cleaned)
    return ""
