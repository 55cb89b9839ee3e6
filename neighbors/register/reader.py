"""Register spreadsheet reader: first worksheet → raw rows of cell text."""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, NamedTuple

from openpyxl import load_workbook

from neighbors.config import (
    AREA_COLUMN,
    BASIS_COLUMN,
    FIRST_DATA_ROW,
    FLAT_COLUMN,
    ID_COLUMN,
    NAME_COLUMN,
    SHARE_COLUMN,
)

logger = logging.getLogger(__name__)


class RawRow(NamedTuple):
    """One register row as the text the spreadsheet displays."""
    id: str
    flat: str
    area: str
    name: str
    basis: str
    share: str


def cell_text(value) -> str:
    """Render an openpyxl cell value as text.

    Integral floats lose their trailing ``.0`` so a flat number stored as
    12.0 reads back as "12".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def read_rows(
    path: Path,
    first_row: int = FIRST_DATA_ROW,
    id_column: int = ID_COLUMN,
    flat_column: int = FLAT_COLUMN,
    area_column: int = AREA_COLUMN,
    name_column: int = NAME_COLUMN,
    basis_column: int = BASIS_COLUMN,
    share_column: int = SHARE_COLUMN,
) -> List[RawRow]:
    """Read every data row of the first worksheet.

    Columns are 1-based, matching the spreadsheet's own numbering.
    """
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows: List[RawRow] = []
        for values in ws.iter_rows(min_row=first_row, values_only=True):
            def _get(column: int) -> str:
                if column - 1 < len(values):
                    return cell_text(values[column - 1])
                return ""

            rows.append(RawRow(
                id=_get(id_column),
                flat=_get(flat_column),
                area=_get(area_column),
                name=_get(name_column),
                basis=_get(basis_column),
                share=_get(share_column),
            ))
    finally:
        wb.close()

    logger.info("Read %d rows from %s", len(rows), path.name)
    return rows
