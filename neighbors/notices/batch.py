"""Batch coordinator: groups → fixed-size batches → one output file each.

Within a batch, notices are expanded on a thread pool. Each worker checks
out its own template clone under the snapshot lock; results are merged on
the calling thread in group order, so output order never depends on which
worker finishes first.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from docx.document import Document as DocxDocument

from neighbors.config import BATCH_SIZE, DATA_ROW_INDEX, NAME_ANCHOR, OUTPUT_PATTERN, WORKERS
from neighbors.notices.expander import expand_notice
from neighbors.notices.output import OutputDocument
from neighbors.notices.template import TemplateSnapshot
from neighbors.register.group import PersonGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Batch:
    """A contiguous slice of groups.

    ``end`` is the nominal offset ``start + batch_size``; the last batch may
    hold fewer groups than that.
    """
    start: int
    end: int
    groups: Tuple[PersonGroup, ...]


def plan_batches(groups: Sequence[PersonGroup], batch_size: int = BATCH_SIZE) -> List[Batch]:
    if batch_size < 1:
        raise ValueError(f"Batch size must be positive, got {batch_size}")
    return [
        Batch(start=start, end=start + batch_size, groups=tuple(groups[start:start + batch_size]))
        for start in range(0, len(groups), batch_size)
    ]


def run_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")


def output_path(output_dir: Path, batch: Batch, timestamp: str,
                pattern: str = OUTPUT_PATTERN) -> Path:
    return output_dir / pattern.format(start=batch.start, end=batch.end, timestamp=timestamp)


def _expand_one(
    snapshot: TemplateSnapshot,
    group: PersonGroup,
    strict_lock: bool,
    name_anchor: str,
    data_row_index: int,
) -> DocxDocument:
    logger.info("Working with %s", group.name)
    if strict_lock:
        with snapshot.lock:
            filled = expand_notice(group, snapshot.checkout(), name_anchor, data_row_index)
    else:
        filled = expand_notice(group, snapshot.checkout(), name_anchor, data_row_index)
    logger.info("Completed with %s", group.name)
    return filled


def process_batch(
    batch: Batch,
    snapshot: TemplateSnapshot,
    path: Path,
    workers: int = WORKERS,
    strict_lock: bool = False,
    name_anchor: str = NAME_ANCHOR,
    data_row_index: int = DATA_ROW_INDEX,
) -> int:
    """Expand, merge, finalize and save one batch. Returns groups merged."""
    logger.info("Analysing batch from %d to %d", batch.start, batch.end)
    output = OutputDocument(path, snapshot.checkout())

    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        futures = [
            pool.submit(_expand_one, snapshot, group, strict_lock, name_anchor, data_row_index)
            for group in batch.groups
        ]
        # Submission order, not completion order
        for future in futures:
            output.append(future.result())

    output.finalize()
    output.save()
    logger.info("Document created successfully at %s", path)
    return output.count


def run_batches(
    groups: Sequence[PersonGroup],
    snapshot: TemplateSnapshot,
    output_dir: Path,
    batch_size: int = BATCH_SIZE,
    workers: int = WORKERS,
    strict_lock: bool = False,
    timestamp: Optional[str] = None,
    name_anchor: str = NAME_ANCHOR,
    data_row_index: int = DATA_ROW_INDEX,
) -> Dict:
    """Process every batch in order, one after another.

    Returns:
        Summary dict: {groups, batches, processed, outputs, elapsed}
    """
    start = time.time()
    timestamp = timestamp or run_timestamp()
    batches = plan_batches(groups, batch_size)

    processed = 0
    outputs: List[Path] = []
    for batch in batches:
        path = output_path(output_dir, batch, timestamp)
        processed += process_batch(
            batch,
            snapshot,
            path,
            workers=workers,
            strict_lock=strict_lock,
            name_anchor=name_anchor,
            data_row_index=data_row_index,
        )
        outputs.append(path)

    elapsed = time.time() - start
    logger.info(
        "Done: %d of %d groups in %d files, %.1fs", processed, len(groups), len(outputs), elapsed
    )

    return {
        "groups": len(groups),
        "batches": len(batches),
        "processed": processed,
        "outputs": outputs,
        "elapsed": round(elapsed, 1),
    }
