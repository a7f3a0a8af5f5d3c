"""
Tests for the N-Triples line parser.
"""

import pytest

from wikidata_filter.errors import FatalError, StatementSyntaxError
from wikidata_filter.statement import IRI, Blank, DataType, Lang, Literal, Statement, parse


class TestParse:
    def test_literal_with_type(self):
        line = (
            '<http://www.wikidata.org/entity/Q1644> <http://www.wikidata.org/prop/direct/P2043> '
            '"+1094.26"^^<http://www.w3.org/2001/XMLSchema#decimal> .'
        )
        assert parse(1, line) == Statement(
            subject=IRI("http://www.wikidata.org/entity/Q1644"),
            predicate="http://www.wikidata.org/prop/direct/P2043",
            object=Literal("+1094.26", DataType("http://www.w3.org/2001/XMLSchema#decimal")),
        )

    def test_literal_with_lang(self):
        line = '<http://www.wikidata.org/entity/Q177> <http://schema.org/name> "pizza"@en .'
        assert parse(1, line) == Statement(
            subject=IRI("http://www.wikidata.org/entity/Q177"),
            predicate="http://schema.org/name",
            object=Literal("pizza", Lang("en")),
        )

    def test_literal_with_subtagged_lang(self):
        line = '<http://www.wikidata.org/entity/Q177> <http://schema.org/name> "pizza"@zh-Hant-TW .'
        assert parse(1, line).object == Literal("pizza", Lang("zh-Hant-TW"))

    def test_plain_literal(self):
        line = (
            '<http://www.wikidata.org/entity/Q177> '
            '<http://www.wikidata.org/prop/direct/P373> "Pizzas" .'
        )
        assert parse(1, line) == Statement(
            subject=IRI("http://www.wikidata.org/entity/Q177"),
            predicate="http://www.wikidata.org/prop/direct/P373",
            object=Literal("Pizzas", None),
        )

    def test_empty_literal(self):
        assert parse(1, '<a> <b> "" .').object == Literal("")

    def test_blank_subject(self):
        assert parse(1, "_:foo <bar> <baz>") == Statement(
            subject=Blank("foo"), predicate="bar", object=IRI("baz")
        )

    def test_blank_object(self):
        assert parse(1, "<foo> <bar> _:baz") == Statement(
            subject=IRI("foo"), predicate="bar", object=Blank("baz")
        )

    def test_surrounding_whitespace_and_newline(self):
        statement = parse(1, "  <foo>\t<bar>   <baz>  .\r\n")
        assert statement == Statement(subject=IRI("foo"), predicate="bar", object=IRI("baz"))

    def test_trailing_content_is_ignored(self):
        statement = parse(1, "<foo> <bar> <baz> <ignored> . # comment")
        assert statement.object == IRI("baz")

    def test_parse_is_deterministic(self):
        line = '<http://www.wikidata.org/entity/Q177> <http://schema.org/name> "pizza"@en .\n'
        assert parse(1, line) == parse(99, line)

    def test_statement_is_immutable(self):
        statement = parse(1, "<foo> <bar> <baz>")
        with pytest.raises(AttributeError):
            statement.predicate = "other"


class TestParseErrors:
    @pytest.mark.parametrize(
        "line",
        [
            "",
            "not a statement",
            "<foo> <bar>",
            '<foo> bar "baz"',
            '"foo" <bar> <baz>',
            "<foo> _:bar <baz>",
            '<foo> <bar> "unterminated',
        ],
    )
    def test_invalid_line_is_fatal(self, line):
        with pytest.raises(StatementSyntaxError) as excinfo:
            parse(42, line)
        assert isinstance(excinfo.value, FatalError)
        assert excinfo.value.line_number == 42
        assert excinfo.value.line == line

    def test_message_names_line_and_text(self):
        with pytest.raises(StatementSyntaxError, match="Invalid line: 7: 'garbage'"):
            parse(7, "garbage")
