from decimal import Decimal

import pytest
from docx import Document

from neighbors.config import NAME_ANCHOR
from neighbors.notices.expander import (
    data_rows,
    expand_notice,
    find_anchor,
    row_values,
    substitute_name,
)
from neighbors.notices.template import TemplateSnapshot, TemplateStructureError
from neighbors.register.group import PersonGroup, group_records
from neighbors.register.normalize import OwnershipRecord, normalize_row
from neighbors.register.reader import RawRow

from conftest import build_template


def _group(name, *rows):
    records = tuple(
        OwnershipRecord(person_name=name, record_id=flat, flat_number=flat,
                        area=Decimal(area), share=Decimal(share), basis=basis)
        for flat, area, share, basis in rows
    )
    return PersonGroup(name=name, records=records)


def _paragraph_texts(doc):
    return [p.text for p in doc.paragraphs]


def test_single_record_fills_existing_row(template_path):
    snapshot = TemplateSnapshot.load(template_path)
    [record] = normalize_row(RawRow(id="1", flat="12", area="45.5", name="Ivanov", basis="deed", share="1"))
    [group] = group_records([record])

    doc = expand_notice(group, snapshot.checkout())

    assert data_rows(doc.tables[0]) == [["12", "45.5", "1", "deed", ""]]
    assert "Ivanov" in _paragraph_texts(doc)
    assert NAME_ANCHOR not in _paragraph_texts(doc)


def test_rows_expand_to_record_count(template_path):
    snapshot = TemplateSnapshot.load(template_path)
    group = _group("Petrov", ("7", "30", "0.5", "deed2"), ("8", "41.2", "1", "deed3"), ("9", "12", "0.25", "gift"))

    doc = expand_notice(group, snapshot.checkout())
    table = doc.tables[0]

    assert len(table.rows) == 2 + 3
    assert data_rows(table) == [
        ["7", "30", "0.5", "deed2", ""],
        ["8", "41.2", "1", "deed3", ""],
        ["9", "12", "0.25", "gift", ""],
    ]
    # header rows untouched
    assert [c.text for c in table.rows[0].cells] == ["Flat", "Area", "Share", "Basis", "Signature"]


def test_clone_is_independent_of_template(template_path):
    snapshot = TemplateSnapshot.load(template_path)
    expand_notice(_group("A", ("1", "1", "1", "x"), ("2", "2", "1", "y")), snapshot.checkout())

    fresh = snapshot.checkout()
    assert len(fresh.tables[0].rows) == 3
    assert data_rows(fresh.tables[0]) == [["", "", "", "", ""]]
    assert find_anchor(fresh) is not None


def test_missing_anchor_is_not_fatal(tmp_path):
    path = build_template(tmp_path / "t.docx", anchor=False)
    snapshot = TemplateSnapshot.load(path)
    assert not snapshot.has_anchor

    doc = expand_notice(_group("Ivanov", ("12", "45.5", "1", "deed")), snapshot.checkout())
    assert "Ivanov" not in _paragraph_texts(doc)
    assert data_rows(doc.tables[0]) == [["12", "45.5", "1", "deed", ""]]


def test_anchor_split_across_runs(tmp_path):
    doc = Document()
    p = doc.add_paragraph()
    p.add_run(NAME_ANCHOR[:40])
    p.add_run(NAME_ANCHOR[40:]).bold = True
    assert substitute_name(doc, "Sidorov")
    assert doc.paragraphs[0].text == "Sidorov"


def test_anchor_must_match_whole_paragraph():
    doc = Document()
    doc.add_paragraph("Owner: " + NAME_ANCHOR)
    assert not substitute_name(doc, "Sidorov")


def test_template_without_table(tmp_path):
    path = build_template(tmp_path / "t.docx", table=False)
    with pytest.raises(TemplateStructureError):
        TemplateSnapshot.load(path)


def test_template_with_narrow_table(tmp_path):
    path = build_template(tmp_path / "t.docx", columns=4)
    with pytest.raises(TemplateStructureError):
        TemplateSnapshot.load(path)


def test_template_without_data_row(template_path):
    with pytest.raises(TemplateStructureError):
        TemplateSnapshot.load(template_path, data_row_index=3)


def test_row_values_order():
    record = OwnershipRecord(person_name="A", record_id="1", flat_number="12",
                             area=Decimal("45.50"), share=Decimal("0.5"), basis="deed")
    assert row_values(record) == ["12", "45.5", "0.5", "deed", ""]
