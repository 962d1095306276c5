"""
Column Access

Looks up a table cell by its declared column header. Saved rows do not
always use the template's current header spelling or order, so lookup
falls back from an exact key, to a case-insensitive key, to position
among the row's data keys.
"""

from typing import Any, List, Mapping, Sequence, Union

from .models import TableRow

RowLike = Union[TableRow, Mapping[str, Any]]


def _cells(row: RowLike) -> Mapping[str, Any]:
    if isinstance(row, TableRow):
        return row.cells
    return TableRow.from_raw(row).cells


def column_value(row: RowLike, header: str, index: int, default: Any = None) -> Any:
    """Return the row's value for ``header`` at declared position ``index``.

    Resolution order:
        1. a key identical to ``header``
        2. the first key equal to ``header`` ignoring case
        3. the data key at position ``index`` (``photos``/``tooltips`` excluded)

    Returns ``default`` when no tier matches.
    """
    cells = _cells(row)

    if header in cells:
        return cells[header]

    folded = header.casefold()
    for key in cells:
        if isinstance(key, str) and key.casefold() == folded:
            return cells[key]

    if 0 <= index < len(cells):
        return list(cells.values())[index]

    return default


def format_scalar(value: Any) -> str:
    """Display text for a scalar: None becomes '', integral floats drop the '.0'."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def display_value(row: RowLike, header: str, index: int) -> str:
    """Cell value as display text; absent and None cells become ''."""
    return format_scalar(column_value(row, header, index))


def resolve_table(rows: Sequence[RowLike], headers: Sequence[str]) -> List[List[str]]:
    """Resolve every row against ``headers`` into a row-major grid of display text."""
    return [
        [display_value(row, header, idx) for idx, header in enumerate(headers)]
        for row in rows
    ]
