import bz2
from collections import Counter
from pathlib import Path
from typing import List

import pytest

from wikidata_filter.tables import ReferenceTables

ENTITY = "http://www.wikidata.org/entity/"
DIRECT = "http://www.wikidata.org/prop/direct/"
SCHEMA_NAME = "http://schema.org/name"
SCHEMA_DESCRIPTION = "http://schema.org/description"
RDFS_LABEL = "http://www.w3.org/2000/01/rdf-schema#label"
WKT = "http://www.opengis.net/ont/geosparql#wktLiteral"


@pytest.fixture
def tables() -> ReferenceTables:
    return ReferenceTables.build(
        excluded_predicates=[SCHEMA_DESCRIPTION],
        identifier_ids=["214"],
        languages=["en", "de"],
        label_predicates=[SCHEMA_NAME, RDFS_LABEL],
    )


def dump_lines(entities: int = 30) -> List[str]:
    """A small truthy-style dump with a known mix of kept and dropped statements."""
    lines = []
    for i in range(1, entities + 1):
        q = f"<{ENTITY}Q{i}>"
        lines.append(f"{q} <{DIRECT}P31> <{ENTITY}Q5> .\n")
        lines.append(f'{q} <{SCHEMA_NAME}> "Name {i}"@en .\n')
        lines.append(f'{q} <{SCHEMA_NAME}> "Nom {i}"@fr .\n')
        lines.append(f'{q} <{SCHEMA_DESCRIPTION}> "thing {i}"@en .\n')
        lines.append(f'{q} <{DIRECT}P214> "{1000 + i}" .\n')
        lines.append(
            f"<https://www.wikidata.org/wiki/Special:EntityData/Q{i}> "
            f"<http://schema.org/about> {q} .\n"
        )
        if i % 3 == 0:
            lines.append(f'{q} <{DIRECT}P625> "Point({i} 50.6411)"^^<{WKT}> .\n')
        if i % 5 == 0:
            lines.append(f"_:b{i} <{DIRECT}P31> <{ENTITY}Q5> .\n")
        if i % 7 == 0:
            lines.append(f"{q} <{DIRECT}P1433> _:n{i} .\n")
    lines.append(f'<{ENTITY}Q1> <{RDFS_LABEL}> "caf\\u00E9\\tbar"@de .\n')
    return lines


def expected_counts(entities: int = 30) -> Counter:
    return Counter({f"Q{i}": 1 + (1 if i % 3 == 0 else 0) for i in range(1, entities + 1)})


def write_dump(path: Path, lines: List[str]) -> Path:
    with bz2.open(path, "wt", encoding="utf-8", newline="") as f:
        f.writelines(lines)
    return path


def read_bz2_lines(path: Path) -> List[str]:
    with bz2.open(path, "rt", encoding="utf-8", newline="") as f:
        return f.readlines()


@pytest.fixture
def dump(tmp_path) -> Path:
    return write_dump(tmp_path / "dump.nt.bz2", dump_lines())
