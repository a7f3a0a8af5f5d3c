"""Immutable reference tables consulted by the classifier."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"

PROPERTIES_FILE = "properties"
IDENTIFIER_PROPERTIES_FILE = "identifier-properties"
LANGUAGES_FILE = "languages"
LABELS_FILE = "labels"

DIRECT_PROPERTY_PREFIX = "http://www.wikidata.org/prop/direct/"
DIRECT_NORMALIZED_PROPERTY_PREFIX = "http://www.wikidata.org/prop/direct-normalized/"


def read_line_set(path: Path) -> FrozenSet[str]:
    """Read a line-oriented data file, ignoring blank lines."""
    with open(path, "r", encoding="utf-8") as f:
        return frozenset(line.strip() for line in f if line.strip())


def expand_identifier_properties(ids: Iterable[str]) -> FrozenSet[str]:
    """Turn numeric property ids into both of their direct property IRIs."""
    expanded = set()
    for pid in ids:
        expanded.add(f"{DIRECT_PROPERTY_PREFIX}P{pid}")
        expanded.add(f"{DIRECT_NORMALIZED_PROPERTY_PREFIX}P{pid}")
    return frozenset(expanded)


@dataclass(frozen=True)
class ReferenceTables:
    excluded_predicates: FrozenSet[str]
    excluded_identifier_predicates: FrozenSet[str]
    languages: FrozenSet[str]
    label_predicates: FrozenSet[str]

    @classmethod
    def build(
        cls,
        excluded_predicates: Iterable[str] = (),
        identifier_ids: Iterable[str] = (),
        languages: Iterable[str] = (),
        label_predicates: Iterable[str] = (),
    ) -> "ReferenceTables":
        return cls(
            excluded_predicates=frozenset(excluded_predicates),
            excluded_identifier_predicates=expand_identifier_properties(identifier_ids),
            languages=frozenset(languages),
            label_predicates=frozenset(label_predicates),
        )

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> "ReferenceTables":
        """Load the tables from ``data_dir``, defaulting to the bundled data files."""
        data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
        tables = cls.build(
            excluded_predicates=read_line_set(data_dir / PROPERTIES_FILE),
            identifier_ids=read_line_set(data_dir / IDENTIFIER_PROPERTIES_FILE),
            languages=read_line_set(data_dir / LANGUAGES_FILE),
            label_predicates=read_line_set(data_dir / LABELS_FILE),
        )
        logger.debug(
            "Loaded reference tables from %s: %d excluded predicates, "
            "%d identifier predicates, %d languages, %d label predicates",
            data_dir,
            len(tables.excluded_predicates),
            len(tables.excluded_identifier_predicates),
            len(tables.languages),
            len(tables.label_predicates),
        )
        return tables
