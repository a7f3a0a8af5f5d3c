import bz2
import logging
import queue
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from wikidata_filter.cancellation import FAILURE, CancellationToken
from wikidata_filter.channel import HandOff
from wikidata_filter.classify import count_statement, extract_label, is_acceptable
from wikidata_filter.errors import FatalError
from wikidata_filter.producer import WorkBatch
from wikidata_filter.statement import parse
from wikidata_filter.tables import ReferenceTables

logger = logging.getLogger(__name__)

SHUTDOWN = object()

COMPRESS_LEVEL = 9


@dataclass
class WorkerResult:
    worker: str
    counts: Optional[Counter] = None
    lines: int = 0
    accepted: int = 0
    labels: int = 0
    error: Optional[BaseException] = None


def statements_path(output_dir: Path, name: str) -> Path:
    return output_dir / f"{name}.nt.bz2"


def labels_path(output_dir: Path, name: str) -> Path:
    return output_dir / f"labels_{name}.bz2"


def open_output(path: Path, compresslevel: int = COMPRESS_LEVEL) -> TextIO:
    return bz2.open(path, "wt", encoding="utf-8", compresslevel=compresslevel, newline="")


class Worker:
    """Consumes batches and owns one output shard for its whole lifetime.

    The shard files are created in the constructor so that a missing or
    read-only output directory fails before any thread starts.
    """

    def __init__(
        self,
        name: str,
        channel: HandOff,
        results: queue.Queue,
        tables: ReferenceTables,
        token: CancellationToken,
        output_dir: Path,
        labels: bool = False,
        statement_counts: bool = False,
        compresslevel: int = COMPRESS_LEVEL,
    ):
        self.name = name
        self.channel = channel
        self.results = results
        self.tables = tables
        self.token = token

        self.statements_file = open_output(statements_path(output_dir, name), compresslevel)
        self.labels_file: Optional[TextIO] = None
        if labels:
            try:
                self.labels_file = open_output(labels_path(output_dir, name), compresslevel)
            except OSError:
                self.statements_file.close()
                raise
        self.counts: Optional[Counter] = Counter() if statement_counts else None

        self.result = WorkerResult(worker=name)

    def handle(self, batch: WorkBatch) -> None:
        for index, line in enumerate(batch.lines):
            statement = parse(batch.line_number(index), line)
            self.result.lines += 1

            if is_acceptable(statement, self.tables):
                self.statements_file.write(line)
                if not line.endswith("\n"):
                    self.statements_file.write("\n")
                self.result.accepted += 1
                if self.counts is not None:
                    count_statement(statement, self.counts)

            if self.labels_file is not None:
                label = extract_label(statement, self.tables)
                if label is not None:
                    self.labels_file.write(f"{label[0]} {label[1]}\n")
                    self.result.labels += 1

        self.statements_file.flush()
        if self.labels_file is not None:
            self.labels_file.flush()

    def close(self) -> None:
        try:
            self.statements_file.close()
        finally:
            if self.labels_file is not None:
                self.labels_file.close()

    def run(self) -> None:
        logger.debug("Worker %s started", self.name)
        try:
            while True:
                item = self.channel.get()
                if item is SHUTDOWN:
                    break
                if self.result.error is not None:
                    # drain until shutdown so the producer never blocks on us
                    continue
                try:
                    self.handle(item)
                except (FatalError, OSError) as e:
                    logger.error("Worker %s stopped on %s: %s", self.name, item.source, e)
                    self.result.error = e
                    self.token.cancel(FAILURE)
                except Exception as e:  # noqa: BLE001
                    logger.exception("Worker %s execution failure", self.name)
                    self.result.error = e
                    self.token.cancel(FAILURE)
        finally:
            logger.info("Stopping worker %s", self.name)
            try:
                self.close()
            except OSError as e:
                if self.result.error is None:
                    self.result.error = e
            self.result.counts = self.counts
            self.results.put(self.result)
