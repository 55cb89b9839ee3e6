"""Fill one template clone with a person's ownership records."""

import logging
from copy import deepcopy
from typing import List

from docx.document import Document as DocxDocument
from docx.oxml.ns import qn
from docx.table import Table, _Row
from docx.text.paragraph import Paragraph

from neighbors.config import DATA_ROW_INDEX, NAME_ANCHOR
from neighbors.notices.template import TemplateStructureError, check_table, paragraph_text
from neighbors.register.group import PersonGroup
from neighbors.register.normalize import OwnershipRecord, format_decimal

logger = logging.getLogger(__name__)


def row_values(record: OwnershipRecord) -> List[str]:
    """Cell texts for one data row; the last column stays blank."""
    return [
        record.flat_number,
        format_decimal(record.area),
        format_decimal(record.share),
        record.basis,
        "",
    ]


def find_anchor(document: DocxDocument, anchor: str = NAME_ANCHOR):
    """First paragraph (body or table cell) whose whole text is the anchor."""
    for p in document.element.body.iter(qn("w:p")):
        if paragraph_text(p) == anchor:
            return p
    return None


def substitute_name(document: DocxDocument, name: str, anchor: str = NAME_ANCHOR) -> bool:
    """Replace the anchor paragraph's text with ``name``.

    The first text element takes the name so its run formatting is kept;
    any further ones are emptied. Returns False when there is no anchor.
    """
    p = find_anchor(document, anchor)
    if p is None:
        return False
    texts = list(p.iter(qn("w:t")))
    if not texts:
        return False
    texts[0].text = name
    for t in texts[1:]:
        t.text = ""
    return True


def _clear_row(tr) -> None:
    """Drop all content from a copied row, keeping paragraph properties."""
    for p in list(tr.iter(qn("w:p"))):
        for child in list(p):
            if child.tag != qn("w:pPr"):
                p.remove(child)


def expand_table(table: Table, count: int, data_row_index: int = DATA_ROW_INDEX) -> None:
    """Grow the table to ``count`` data rows by copying the data row."""
    anchor_tr = table.rows[data_row_index]._tr
    for _ in range(count - 1):
        tr = deepcopy(anchor_tr)
        _clear_row(tr)
        anchor_tr.addnext(tr)


def _insert_text(paragraph: Paragraph, text: str) -> None:
    if not text:
        return
    run = paragraph.add_run(text)
    # Paragraph mark formatting is what Word shows for the empty cell
    pPr = paragraph._p.find(qn("w:pPr"))
    mark = pPr.find(qn("w:rPr")) if pPr is not None else None
    if mark is not None and run._r.find(qn("w:rPr")) is None:
        run._r.insert(0, deepcopy(mark))


def fill_row(row: _Row, values: List[str]) -> None:
    for cell, value in zip(row.cells, values):
        _insert_text(cell.paragraphs[0], value)


def expand_notice(
    group: PersonGroup,
    document: DocxDocument,
    name_anchor: str = NAME_ANCHOR,
    data_row_index: int = DATA_ROW_INDEX,
) -> DocxDocument:
    """Fill a fresh template clone for one person and return it."""
    if not substitute_name(document, group.name, name_anchor):
        logger.debug("No name anchor for %s", group.name)

    if not document.tables:
        raise TemplateStructureError("No tables found in the template document.")
    table = document.tables[0]
    check_table(table, data_row_index)

    expand_table(table, len(group), data_row_index)
    for offset, record in enumerate(group.records):
        fill_row(table.rows[data_row_index + offset], row_values(record))

    return document


def data_rows(table: Table, data_row_index: int = DATA_ROW_INDEX) -> List[List[str]]:
    """Cell texts of every row from the data row on."""
    return [[cell.text for cell in row.cells] for row in list(table.rows)[data_row_index:]]
