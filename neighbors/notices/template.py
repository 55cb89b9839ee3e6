"""Notice template: loaded once per run, cloned once per person."""

import logging
import threading
from io import BytesIO
from pathlib import Path

from docx import Document
from docx.document import Document as DocxDocument
from docx.oxml.ns import qn
from docx.table import Table

from neighbors.config import DATA_ROW_INDEX, NAME_ANCHOR

logger = logging.getLogger(__name__)

# flat, area, share, basis, reserved
FILL_COLUMNS = 5


class TemplateStructureError(ValueError):
    """Raised when the template cannot hold a notice table."""


def paragraph_text(p) -> str:
    """Concatenated text of every <w:t> in a paragraph element."""
    return "".join(t.text or "" for t in p.iter(qn("w:t")))


def check_table(table: Table, data_row_index: int = DATA_ROW_INDEX) -> None:
    """Ensure the table has a data row wide enough to fill."""
    rows = len(table.rows)
    if rows <= data_row_index:
        raise TemplateStructureError(
            f"Template table has {rows} rows; no data row at index {data_row_index}."
        )
    cells = len(table.rows[data_row_index].cells)
    if cells < FILL_COLUMNS:
        raise TemplateStructureError(
            f"Template data row has {cells} cells; {FILL_COLUMNS} are required."
        )


class TemplateSnapshot:
    """In-memory master copy of the template plus the run-wide lock.

    Every clone is parsed fresh from the master bytes, so clones share no
    XML with each other or with the master. Checkout happens under
    ``lock``; the same lock serializes whole expansions in strict mode.
    """

    def __init__(self, data: bytes, name: str = "template",
                 data_row_index: int = DATA_ROW_INDEX, name_anchor: str = NAME_ANCHOR):
        self.name = name
        self.lock = threading.RLock()
        self._master = data
        self._source = Document(BytesIO(data))

        if not self._source.tables:
            raise TemplateStructureError(f"No tables found in {name}.")
        check_table(self._source.tables[0], data_row_index)

        body = self._source.element.body
        self.has_anchor = any(paragraph_text(p) == name_anchor for p in body.iter(qn("w:p")))
        if not self.has_anchor:
            logger.warning("No name anchor in %s; notices will not carry names.", name)

    @classmethod
    def load(cls, path: Path, **kwargs) -> "TemplateSnapshot":
        return cls(path.read_bytes(), name=path.name, **kwargs)

    @property
    def table_count(self) -> int:
        return len(self._source.tables)

    def checkout(self) -> DocxDocument:
        """Return an independent, unfilled copy of the template."""
        with self.lock:
            return Document(BytesIO(self._master))
