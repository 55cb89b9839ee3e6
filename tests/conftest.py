"""Shared fixtures: real register spreadsheets and notice templates on disk."""

from pathlib import Path

import pytest
from docx import Document
from openpyxl import Workbook

from neighbors.config import NAME_ANCHOR

HEADER = ["Flat", "Area", "Share", "Basis", "Signature"]


def build_template(path: Path, anchor: bool = True, table: bool = True, columns: int = 5) -> Path:
    """Two header rows plus one empty data row, as in the real notice."""
    doc = Document()
    doc.add_paragraph("Notice of the general meeting of owners")
    if anchor:
        doc.add_paragraph(NAME_ANCHOR)
    if table:
        t = doc.add_table(rows=3, cols=columns)
        for i, title in enumerate(HEADER[:columns]):
            t.rows[0].cells[i].text = title
            t.rows[1].cells[i].text = str(i + 1)
    doc.add_paragraph("Signed: ____________")
    doc.save(path)
    return path


def build_register(path: Path, rows) -> Path:
    """Rows are dicts with id/area/basis/name/share; the id column doubles as flat."""
    wb = Workbook()
    ws = wb.active
    ws.append(["Flat", None, "Area", "Basis", "Owner", "Share"])
    for r in rows:
        ws.append([r.get("id"), None, r.get("area"), r.get("basis"), r.get("name"), r.get("share")])
    wb.save(path)
    return path


@pytest.fixture
def template_path(tmp_path):
    return build_template(tmp_path / "template.docx")


@pytest.fixture
def input_dir(tmp_path):
    d = tmp_path / "input"
    d.mkdir()
    build_template(d / "template.docx")
    return d
