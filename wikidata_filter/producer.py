import bz2
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO, Union

from tqdm import tqdm

from wikidata_filter.cancellation import CancellationToken
from wikidata_filter.channel import HandOff

logger = logging.getLogger(__name__)

BATCH_SIZE = 100
PROGRESS_INTERVAL = 100_000


@dataclass
class WorkBatch:
    """Lines handed to one worker. ``last_line`` numbers the final line of the batch."""

    lines: List[str]
    last_line: int
    source: str = "<stream>"

    def line_number(self, index: int) -> int:
        return self.last_line - len(self.lines) + 1 + index


@dataclass
class ProduceResult:
    lines: int
    completed: bool


def open_dump(path: Union[str, Path]) -> TextIO:
    """Open a dump for line reading.

    Lines are split on ``\\n`` only and keep their line endings as they are on disk.
    """
    path = Path(path)
    if path.suffix == ".bz2":
        return bz2.open(path, "rt", encoding="utf-8", newline="\n")
    return open(path, "r", encoding="utf-8", newline="\n")


class BatchProducer:
    """Reads dump lines and hands them to the workers in fixed-size batches.

    The skip count applies to the whole run: once ``skip`` lines have been
    discarded, every later line of every later file is processed.
    """

    def __init__(
        self,
        channel: HandOff,
        token: CancellationToken,
        skip: int = 0,
        batch_size: int = BATCH_SIZE,
        progress_interval: int = PROGRESS_INTERVAL,
        progress_bar: Optional[tqdm] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.channel = channel
        self.token = token
        self.skip_remaining = skip
        self.batch_size = batch_size
        self.progress_interval = progress_interval
        self.progress_bar = progress_bar
        self.batches_sent = 0

    def _send(self, lines: List[str], last_line: int, source: str) -> None:
        self.channel.put(WorkBatch(lines=lines, last_line=last_line, source=source))
        self.batches_sent += 1
        if self.progress_bar is not None:
            self.progress_bar.update(len(lines))

    def produce(self, stream: TextIO, source: str = "<stream>") -> ProduceResult:
        total = 0
        lines: List[str] = []
        completed = True

        if self.skip_remaining > 0:
            logger.info("Skipping %s lines", f"{self.skip_remaining:,}")

        while True:
            if self.token.is_cancelled():
                logger.warning("Interrupted after %s lines of %s", f"{total:,}", source)
                completed = False
                break

            line = stream.readline()
            if not line:
                break
            total += 1

            skipped = self.skip_remaining > 0
            if skipped:
                self.skip_remaining -= 1
            else:
                lines.append(line)
                if len(lines) >= self.batch_size:
                    self._send(lines, total, source)
                    lines = []

            if total % self.progress_interval == 0:
                logger.info("%s %s", "skipped" if skipped else "processed", f"{total:,}")

        if lines:
            self._send(lines, total, source)

        return ProduceResult(lines=total, completed=completed)

    def produce_file(self, path: Union[str, Path]) -> ProduceResult:
        with open_dump(path) as stream:
            logger.info("Processing %s", path)
            result = self.produce(stream, source=str(path))
        logger.info("Processed %s: %s lines", path, f"{result.lines:,}")
        return result
