"""
Threaded filter pipeline.

The main thread reads the dumps and hands batches of lines to a fixed pool of
worker threads through a zero-capacity channel, so reading never runs more
than one batch ahead of the first idle worker:

    producer --(HandOff)--> worker 1..N --> <name>.nt.bz2, labels_<name>.bz2
                                      \
                                       +--(result queue)--> statement_counts.bz2

Shutdown happens in three phases:

1. the producer stops, either at the end of the last file or because the
   cancellation token was set;
2. one shutdown signal is handed to each worker, which finalizes its
   compressed files and reports its result;
3. the per-worker counters are merged and written.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Sequence, Union

from tqdm import tqdm

from wikidata_filter.aggregate import (
    STATEMENT_COUNTS_FILE,
    collect_results,
    merge_counts,
    write_counts,
)
from wikidata_filter.cancellation import CancellationToken
from wikidata_filter.channel import HandOff
from wikidata_filter.errors import WorkerFailed
from wikidata_filter.producer import BATCH_SIZE, PROGRESS_INTERVAL, BatchProducer
from wikidata_filter.tables import ReferenceTables
from wikidata_filter.worker import COMPRESS_LEVEL, SHUTDOWN, Worker, WorkerResult

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    files: Dict[str, int] = field(default_factory=dict)
    interrupted: bool = False
    lines: int = 0
    accepted: int = 0
    labels: int = 0
    entities: int = 0
    elapsed: float = 0.0


class FilterPipeline:
    def __init__(
        self,
        tables: ReferenceTables,
        token: CancellationToken,
        output_dir: Union[str, Path] = ".",
        threads: int = 1,
        labels: bool = False,
        statement_counts: bool = False,
        skip: int = 0,
        batch_size: int = BATCH_SIZE,
        progress_interval: int = PROGRESS_INTERVAL,
        compresslevel: int = COMPRESS_LEVEL,
        progress: bool = False,
    ):
        if threads < 1:
            raise ValueError("threads must be at least 1")
        if skip < 0:
            raise ValueError("skip must not be negative")

        self.tables = tables
        self.token = token
        self.output_dir = Path(output_dir)
        self.threads = threads
        self.labels = labels
        self.statement_counts = statement_counts
        self.skip = skip
        self.batch_size = batch_size
        self.progress_interval = progress_interval
        self.compresslevel = compresslevel
        self.progress = progress

    def _create_workers(self, channel: HandOff, results: queue.Queue) -> List[Worker]:
        workers: List[Worker] = []
        try:
            for index in range(1, self.threads + 1):
                workers.append(
                    Worker(
                        name=str(index),
                        channel=channel,
                        results=results,
                        tables=self.tables,
                        token=self.token,
                        output_dir=self.output_dir,
                        labels=self.labels,
                        statement_counts=self.statement_counts,
                        compresslevel=self.compresslevel,
                    )
                )
        except OSError:
            for worker in workers:
                worker.close()
            raise
        return workers

    def run(self, paths: Sequence[Union[str, Path]]) -> RunSummary:
        start = time.monotonic()
        summary = RunSummary()

        self.output_dir.mkdir(parents=True, exist_ok=True)

        channel = HandOff()
        results: queue.Queue = queue.Queue()
        workers = self._create_workers(channel, results)

        threads = []
        for worker in workers:
            t = threading.Thread(target=worker.run, name=f"worker-{worker.name}")
            t.start()
            threads.append(t)
        logger.info("Started %d workers", len(threads))

        progress_bar = tqdm(
            desc="Filtering", unit="lines", dynamic_ncols=True, disable=not self.progress
        )
        producer = BatchProducer(
            channel,
            self.token,
            skip=self.skip,
            batch_size=self.batch_size,
            progress_interval=self.progress_interval,
            progress_bar=progress_bar,
        )

        worker_results: List[WorkerResult] = []
        try:
            for path in paths:
                produced = producer.produce_file(path)
                summary.files[str(path)] = produced.lines
                if not produced.completed:
                    summary.interrupted = True
                    break
        finally:
            for _ in workers:
                channel.put(SHUTDOWN)
            worker_results = collect_results(results, len(workers))
            for t in threads:
                t.join()
            progress_bar.close()

        for result in sorted(worker_results, key=lambda r: int(r.worker)):
            if result.error is not None:
                raise WorkerFailed(result.worker, result.error) from result.error

        summary.lines = sum(r.lines for r in worker_results)
        summary.accepted = sum(r.accepted for r in worker_results)
        summary.labels = sum(r.labels for r in worker_results)

        if self.statement_counts:
            merged = merge_counts(worker_results)
            summary.entities = write_counts(
                merged, self.output_dir / STATEMENT_COUNTS_FILE, self.compresslevel
            )

        summary.elapsed = time.monotonic() - start
        logger.info(
            "Accepted %s of %s statements, %s labels, %s counted entities",
            f"{summary.accepted:,}",
            f"{summary.lines:,}",
            f"{summary.labels:,}",
            f"{summary.entities:,}",
        )
        logger.info("Took %s", timedelta(seconds=summary.elapsed))
        return summary
