"""Merging of per-worker statement counts."""

import bz2
import logging
import queue
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Mapping

from wikidata_filter.worker import COMPRESS_LEVEL, WorkerResult

logger = logging.getLogger(__name__)

STATEMENT_COUNTS_FILE = "statement_counts.bz2"


def collect_results(results: queue.Queue, count: int) -> List[WorkerResult]:
    """Block until exactly ``count`` worker results have arrived."""
    return [results.get() for _ in range(count)]


def merge_counts(results: Iterable[WorkerResult]) -> Counter:
    merged: Counter = Counter()
    for result in results:
        if result.counts:
            merged.update(result.counts)
    return merged


def write_counts(
    counts: Mapping[str, int], path: Path, compresslevel: int = COMPRESS_LEVEL
) -> int:
    """Write ``<entity-id> <count>`` lines sorted by entity id. Returns the entity count."""
    with bz2.open(path, "wt", encoding="utf-8", compresslevel=compresslevel) as f:
        for entity in sorted(counts):
            f.write(f"{entity} {counts[entity]}\n")
    logger.info("Wrote statement counts for %s entities to %s", f"{len(counts):,}", path)
    return len(counts)
