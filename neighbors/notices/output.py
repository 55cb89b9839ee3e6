"""Batch output document: filled notices merged one section per person."""

import logging
import os
import tempfile
from copy import deepcopy
from pathlib import Path

from docx.document import Document as DocxDocument
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

logger = logging.getLogger(__name__)


def _section_break(sectPr):
    """Empty paragraph whose properties end a section."""
    p = OxmlElement("w:p")
    pPr = OxmlElement("w:pPr")
    pPr.append(deepcopy(sectPr) if sectPr is not None else OxmlElement("w:sectPr"))
    p.append(pPr)
    return p


def _is_section_break(element) -> bool:
    if element.tag != qn("w:p"):
        return False
    pPr = element.find(qn("w:pPr"))
    if pPr is None or pPr.find(qn("w:sectPr")) is None:
        return False
    return element.find(qn("w:r")) is None


class OutputDocument:
    """One output file per batch.

    Built on an unfilled template clone with its body emptied, so styles,
    numbering, headers and relationship ids match every merged clone of
    the same template.
    """

    def __init__(self, path: Path, base: DocxDocument):
        self.path = path
        self.document = base
        self._body = base.element.body
        self._body.clear_content()
        self.count = 0

    def _insert(self, element) -> None:
        sectPr = self._body.sectPr
        if sectPr is not None:
            sectPr.addprevious(element)
        else:
            self._body.append(element)

    def append(self, filled: DocxDocument) -> None:
        """Copy a filled clone's body in, followed by a section break."""
        source = filled.element.body
        for child in list(source):
            if child.tag == qn("w:sectPr"):
                continue
            self._insert(deepcopy(child))
        self._insert(_section_break(source.sectPr))
        self.count += 1

    def finalize(self) -> None:
        """Strip the trailing section break; the body's own sectPr ends the last notice."""
        last = None
        for child in self._body:
            if child.tag != qn("w:sectPr"):
                last = child
        if last is not None and _is_section_break(last):
            self._body.remove(last)

    def save(self) -> None:
        """Write to disk atomically; a failed save leaves no file behind."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, suffix=".tmp", prefix=".notices_"
        )
        os.close(fd)
        try:
            self.document.save(tmp_path)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.info("Saved %d notices to %s", self.count, self.path.name)
