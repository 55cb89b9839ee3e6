"""Group ownership records by person, keeping first-seen order."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from neighbors.register.normalize import OwnershipRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersonGroup:
    name: str
    records: Tuple[OwnershipRecord, ...]

    def __len__(self) -> int:
        return len(self.records)

    @property
    def total_share(self) -> Decimal:
        return sum((r.share for r in self.records), Decimal(0))

    @property
    def total_area(self) -> Decimal:
        return sum((r.area for r in self.records), Decimal(0))


def group_records(records: Iterable[OwnershipRecord]) -> List[PersonGroup]:
    """Group by exact person name.

    Groups appear in the order their name is first seen; records keep their
    input order inside a group.
    """
    by_name: Dict[str, List[OwnershipRecord]] = {}
    for record in records:
        by_name.setdefault(record.person_name, []).append(record)

    groups = [PersonGroup(name=name, records=tuple(recs)) for name, recs in by_name.items()]
    logger.info("Grouped into %d persons", len(groups))
    return groups
