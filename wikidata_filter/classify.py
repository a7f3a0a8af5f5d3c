"""Per-statement decisions: keep it, pull a label out of it, count it."""

from typing import MutableMapping, Optional, Tuple

from wikidata_filter.statement import IRI, Blank, DataType, Lang, Literal, Statement, Subject
from wikidata_filter.tables import DIRECT_PROPERTY_PREFIX, ReferenceTables
from wikidata_filter.unescape import unescape

ENTITY_PREFIX = "http://www.wikidata.org/entity/"
IGNORED_SUBJECT_PREFIX = "https://www.wikidata.org/wiki/Special:EntityData"
WKT_LITERAL = "http://www.opengis.net/ont/geosparql#wktLiteral"


def entity_id(subject: Subject) -> Optional[str]:
    if isinstance(subject, IRI) and subject.value.startswith(ENTITY_PREFIX):
        return subject.value[len(ENTITY_PREFIX) :]
    return None


def is_acceptable(statement: Statement, tables: ReferenceTables) -> bool:
    if (
        statement.predicate in tables.excluded_predicates
        or statement.predicate in tables.excluded_identifier_predicates
    ):
        return False

    subject = statement.subject
    if isinstance(subject, Blank):
        return False
    if subject.value.startswith(IGNORED_SUBJECT_PREFIX):
        return False

    obj = statement.object
    if isinstance(obj, Blank):
        return False
    if isinstance(obj, Literal):
        if isinstance(obj.extra, Lang) and obj.extra.tag not in tables.languages:
            return False
        # geometries qualified with a non-Earth globe are unsupported downstream
        if (
            isinstance(obj.extra, DataType)
            and obj.extra.iri == WKT_LITERAL
            and obj.value.startswith("<")
        ):
            return False

    return True


def extract_label(statement: Statement, tables: ReferenceTables) -> Optional[Tuple[str, str]]:
    """Return ``(entity id, label)`` for a label statement in an accepted language."""
    if statement.predicate not in tables.label_predicates:
        return None

    obj = statement.object
    if not (isinstance(obj, Literal) and isinstance(obj.extra, Lang)):
        return None
    if obj.extra.tag not in tables.languages:
        return None

    entity = entity_id(statement.subject)
    if entity is None:
        return None

    return entity, unescape(obj.value)


def count_statement(statement: Statement, counts: MutableMapping[str, int]) -> bool:
    if not statement.predicate.startswith(DIRECT_PROPERTY_PREFIX):
        return False

    entity = entity_id(statement.subject)
    if entity is None:
        return False

    counts[entity] = counts.get(entity, 0) + 1
    return True
