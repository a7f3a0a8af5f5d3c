"""Public entrypoints for the wikidata_filter package."""

from .classify import count_statement, entity_id, extract_label, is_acceptable
from .errors import FatalError, StatementSyntaxError, UnescapeError, WorkerFailed
from .pipeline import FilterPipeline, RunSummary
from .statement import IRI, Blank, DataType, Lang, Literal, Statement, parse
from .tables import ReferenceTables
from .unescape import unescape

__all__ = [
    "IRI",
    "Blank",
    "DataType",
    "FatalError",
    "FilterPipeline",
    "Lang",
    "Literal",
    "ReferenceTables",
    "RunSummary",
    "Statement",
    "StatementSyntaxError",
    "UnescapeError",
    "WorkerFailed",
    "count_statement",
    "entity_id",
    "extract_label",
    "is_acceptable",
    "parse",
    "unescape",
]
