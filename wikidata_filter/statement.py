"""
N-Triples statement model and line parser.

Each dump line holds one statement:

    <subject> <predicate> <object> .

where the subject is an IRI or a blank node and the object is an IRI, a blank
node or a literal with an optional language tag or datatype. Only the first
statement on a line is parsed; anything after it (usually the closing period)
is ignored.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from wikidata_filter.errors import StatementSyntaxError


@dataclass(frozen=True)
class IRI:
    value: str


@dataclass(frozen=True)
class Blank:
    label: str


@dataclass(frozen=True)
class Lang:
    tag: str


@dataclass(frozen=True)
class DataType:
    iri: str


@dataclass(frozen=True)
class Literal:
    value: str
    extra: Optional[Union[Lang, DataType]] = None


Subject = Union[IRI, Blank]
Object = Union[IRI, Blank, Literal]


@dataclass(frozen=True)
class Statement:
    subject: Subject
    predicate: str
    object: Object


STATEMENT_RE = re.compile(
    r"""
    ^
    \s*

    # subject
    (?:
        <(?P<subject_iri>[^>]*)>
      |
        _:(?P<subject_blank>\S+)
    )

    \s*

    # predicate
    <(?P<predicate>[^>]*)>

    \s*

    # object
    (?:
        <(?P<object_iri>[^>]*)>
      |
        _:(?P<object_blank>\S+)
      |
        "(?P<literal>[^"]*)"
        (?:
            @(?P<lang>[a-zA-Z]+(?:-[a-zA-Z0-9]+)*)
          |
            \^\^<(?P<datatype>[^>]*)>
        )?
    )
    """,
    re.VERBOSE,
)


def parse(line_number: int, line: str) -> Statement:
    """Parse one dump line, raising StatementSyntaxError if it is malformed."""
    match = STATEMENT_RE.match(line)
    if match is None:
        raise StatementSyntaxError(line_number, line)

    groups = match.groupdict()

    if groups["subject_iri"] is not None:
        subject: Subject = IRI(groups["subject_iri"])
    else:
        subject = Blank(groups["subject_blank"])

    if groups["object_iri"] is not None:
        obj: Object = IRI(groups["object_iri"])
    elif groups["object_blank"] is not None:
        obj = Blank(groups["object_blank"])
    else:
        extra: Optional[Union[Lang, DataType]] = None
        if groups["lang"] is not None:
            extra = Lang(groups["lang"])
        elif groups["datatype"] is not None:
            extra = DataType(groups["datatype"])
        obj = Literal(groups["literal"], extra)

    return Statement(subject=subject, predicate=groups["predicate"], object=obj)
