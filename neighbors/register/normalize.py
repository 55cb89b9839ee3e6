"""Register row normalization: raw rows → ownership records.

A name cell may list several co-owners separated by ``SPLIT_SEPARATOR``;
each becomes its own record with an equal part of the row's share.
"""

import logging
import re
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Iterable, List

from neighbors.config import SHARE_PLACES, SHARE_SPLIT, SKIP_MARKER, SPLIT_SEPARATOR
from neighbors.register.reader import RawRow

logger = logging.getLogger(__name__)

_ZERO = Decimal(0)
_SPACES_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class OwnershipRecord:
    person_name: str
    record_id: str
    flat_number: str
    area: Decimal
    share: Decimal
    basis: str


def parse_decimal(text: str) -> Decimal:
    """Parse a locale-formatted number. Anything unparsable is 0.

    Accepts "45,5" and "45.5"; with both separators present ("1 234,5",
    "1,234.5") the last one is the decimal point.
    """
    s = _SPACES_RE.sub("", text or "")
    if not s:
        return _ZERO

    comma, dot = s.rfind(","), s.rfind(".")
    if comma > dot:
        s = s.replace(".", "").replace(",", ".")
    elif comma != -1:
        s = s.replace(",", "")

    try:
        value = Decimal(s)
    except InvalidOperation:
        logger.debug("Unparsable number %r, using 0", text)
        return _ZERO
    if not value.is_finite():
        logger.debug("Non-finite number %r, using 0", text)
        return _ZERO
    return value


def format_decimal(value: Decimal) -> str:
    """Plain decimal text without exponent or trailing zeros: 45.5, 1, 30."""
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def split_share(share: Decimal, parts: int, policy: str = SHARE_SPLIT,
                places: int = SHARE_PLACES) -> List[Decimal]:
    """Divide a share evenly among ``parts`` co-owners.

    "even" divides at full Decimal precision. "exact" rounds each part down
    to ``places`` decimals and gives the remainder to the first part, so
    the parts always add up to ``share``.
    """
    if parts < 1:
        return []
    if policy == "exact":
        quantum = Decimal(1).scaleb(-places)
        part = (share / parts).quantize(quantum, rounding=ROUND_DOWN)
        first = share - part * (parts - 1)
        return [first] + [part] * (parts - 1)
    if policy != "even":
        raise ValueError(f"Unknown share split policy: {policy!r}")
    return [share / parts] * parts


def normalize_row(
    row: RawRow,
    skip_marker: str = SKIP_MARKER,
    separator: str = SPLIT_SEPARATOR,
    share_policy: str = SHARE_SPLIT,
) -> List[OwnershipRecord]:
    """Turn one register row into zero or more ownership records."""
    if row.name.strip() == skip_marker:
        return []
    if not row.id.strip():
        return []

    area = parse_decimal(row.area)
    share = parse_decimal(row.share)

    if separator and separator in row.name:
        names = [n.strip() for n in row.name.split(separator)]
        names = [n for n in names if n]
        shares = split_share(share, len(names), policy=share_policy)
    else:
        names = [row.name]
        shares = [share]

    return [
        OwnershipRecord(
            person_name=name,
            record_id=row.id,
            flat_number=row.flat,
            area=area,
            share=part,
            basis=row.basis,
        )
        for name, part in zip(names, shares)
    ]


def normalize_rows(rows: Iterable[RawRow], **kwargs) -> List[OwnershipRecord]:
    """Normalize rows in order; split siblings stay adjacent."""
    records: List[OwnershipRecord] = []
    skipped = 0
    for row in rows:
        produced = normalize_row(row, **kwargs)
        if not produced:
            skipped += 1
        records.extend(produced)

    logger.info("Normalized %d records (%d rows skipped)", len(records), skipped)
    return records
