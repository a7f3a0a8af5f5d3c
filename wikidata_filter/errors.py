"""Exception hierarchy for the filter pipeline."""


class FilterError(Exception):
    """Base class for all errors raised by wikidata_filter."""


class FatalError(FilterError):
    """Unrecoverable condition. The run must stop instead of skipping input."""


class StatementSyntaxError(FatalError):
    def __init__(self, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"Invalid line: {line_number}: {line!r}")


class UnescapeError(FatalError):
    def __init__(self, index: int, value: str, reason: str) -> None:
        self.index = index
        self.value = value
        super().__init__(f"{reason} at index {index}: {value!r}")


class WorkerFailed(FatalError):
    """Raised in the main thread when a worker stopped on a fatal error."""

    def __init__(self, worker: str, cause: BaseException) -> None:
        self.worker = worker
        self.cause = cause
        super().__init__(f"worker {worker} failed: {cause}")
