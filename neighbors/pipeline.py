"""End-to-end run: register + template in the input folder → notice files."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from neighbors.config import (
    BATCH_SIZE,
    INPUT_DIR,
    REGISTER_NAME,
    SHARE_SPLIT,
    TEMPLATE_NAME,
    WORKERS,
)
from neighbors.notices.batch import plan_batches, run_batches
from neighbors.notices.template import TemplateSnapshot
from neighbors.register.group import PersonGroup, group_records
from neighbors.register.normalize import normalize_rows
from neighbors.register.reader import read_rows

logger = logging.getLogger(__name__)


class MissingInputError(FileNotFoundError):
    """Raised when the template or the register is not in the input folder."""


def load_groups(register_path: Path, share_policy: str = SHARE_SPLIT) -> List[PersonGroup]:
    """Read, normalize and group the register."""
    if not register_path.exists():
        raise MissingInputError(f"Data file is missing here {register_path.parent}")
    rows = read_rows(register_path)
    records = normalize_rows(rows, share_policy=share_policy)
    return group_records(records)


def generate_notices(
    input_dir: Path = INPUT_DIR,
    register_name: str = REGISTER_NAME,
    template_name: str = TEMPLATE_NAME,
    batch_size: int = BATCH_SIZE,
    workers: int = WORKERS,
    strict_lock: bool = False,
    share_policy: str = SHARE_SPLIT,
    timestamp: Optional[str] = None,
    dry_run: bool = False,
) -> Dict:
    """Generate one notice file per batch of persons into ``input_dir``.

    Both inputs are checked before anything is read, so a missing file
    never leaves partial output. With ``dry_run`` the register is grouped
    and the batch plan reported, but the template is not touched.

    Returns:
        Summary dict: {groups, records, batches, processed, outputs, elapsed}
    """
    input_dir.mkdir(parents=True, exist_ok=True)
    template_path = input_dir / template_name
    register_path = input_dir / register_name

    if not template_path.exists():
        raise MissingInputError(f"Template file is missing here {input_dir}")
    if not register_path.exists():
        raise MissingInputError(f"Data file is missing here {input_dir}")

    groups = load_groups(register_path, share_policy=share_policy)
    records = sum(len(g) for g in groups)

    if not groups:
        logger.info("No ownership records found in %s.", register_name)
        return {"groups": 0, "records": 0, "batches": 0, "processed": 0,
                "outputs": [], "elapsed": 0.0}

    if dry_run:
        batches = plan_batches(groups, batch_size)
        return {"groups": len(groups), "records": records, "batches": len(batches),
                "processed": 0, "outputs": [], "elapsed": 0.0}

    snapshot = TemplateSnapshot.load(template_path)
    summary = run_batches(
        groups,
        snapshot,
        input_dir,
        batch_size=batch_size,
        workers=workers,
        strict_lock=strict_lock,
        timestamp=timestamp,
    )
    summary["records"] = records
    return summary
