"""Scenario tests for the bundled 1C:Enterprise rule set."""
from __future__ import annotations

import pytest

from rulelex.grammar.rules import RuleSet
from rulelex.grammar.tokens import Token
from rulelex.lexer import Scanner


@pytest.fixture()
def lexer(rules_1c: RuleSet) -> Scanner:
    return Scanner(rules_1c)


def first(lexer: Scanner, source: str) -> Token:
    lexer.parse(source)
    token = lexer.next_token()
    assert token is not None
    return token


def pairs(lexer: Scanner, source: str) -> list[tuple[str, str]]:
    return [(t.tag, t.value) for t in lexer.parse(source) if not t.is_eof]


# ---------------------------------------------------------------------------
# Rule set shape
# ---------------------------------------------------------------------------


def test_rule_order(rules_1c: RuleSet) -> None:
    assert rules_1c.names() == [
        "Whitespace",
        "Comment",
        "Preprocessor",
        "Directive",
        "String",
        "Date",
        "Number",
        "Identifier",
        "Operator",
    ]


def test_whitespace_and_comments_are_suppressed(rules_1c: RuleSet) -> None:
    assert rules_1c.get("Whitespace").suppress
    assert rules_1c.get("Comment").suppress
    assert not rules_1c.get("Identifier").suppress


# ---------------------------------------------------------------------------
# Identifiers and words
# ---------------------------------------------------------------------------


def test_builtin_names_are_plain_identifiers(lexer: Scanner) -> None:
    assert pairs(lexer, "Лев СтрДлина Прав") == [
        ("Identifier", "Лев"),
        ("Identifier", "СтрДлина"),
        ("Identifier", "Прав"),
    ]


def test_word_literals_are_identifiers(lexer: Scanner) -> None:
    source = " Истина  Ложь  Неопределено  Null  True False Undefined"
    assert pairs(lexer, source) == [
        ("Identifier", word)
        for word in ("Истина", "Ложь", "Неопределено", "Null", "True", "False", "Undefined")
    ]


# ---------------------------------------------------------------------------
# String literals
# ---------------------------------------------------------------------------


class TestStrings:
    def test_simple_string(self, lexer: Scanner) -> None:
        token = first(lexer, ' "-just string "')
        assert token.tag == "String"
        assert token.value == "-just string "

    def test_multiline_string_drops_continuation_marker(self, lexer: Scanner) -> None:
        token = first(lexer, ' "-just\n\t|string "')
        assert token.tag == "String"
        assert token.value == "-just\nstring "
        assert (token.line, token.column) == (2, 11)

    def test_doubled_quotes_collapse(self, lexer: Scanner) -> None:
        token = first(lexer, ' "-just "" ""string"" ""123"""')
        assert token.tag == "String"
        assert token.value == '-just " "string" "123"'

    def test_comment_lines_inside_multiline_string_are_dropped(self, lexer: Scanner) -> None:
        source = '"first line\n\t|second line\n\t// comment\n\t|third line"'
        token = first(lexer, source)
        assert token.tag == "String"
        assert token.value == "first line\nsecond line\nthird line"

    def test_empty_string(self, lexer: Scanner) -> None:
        assert pairs(lexer, '""') == [("String", "")]

    def test_unclosed_string_recovers_at_the_quote(self, lexer: Scanner) -> None:
        token = first(lexer, ' "-just string ')
        assert token.tag == "Unknown"
        assert token.value == '"'

    def test_newline_without_continuation_is_not_a_string(self, lexer: Scanner) -> None:
        token = first(lexer, ' "-just\nd|string "')
        assert token.tag == "Unknown"
        assert token.value == '"'


# ---------------------------------------------------------------------------
# Numbers and dates
# ---------------------------------------------------------------------------


class TestNumbersAndDates:
    def test_number(self, lexer: Scanner) -> None:
        token = first(lexer, " 123.45 ")
        assert token.tag == "Number"
        assert token.value == "123.45"

    @pytest.mark.parametrize("source", [" 123.45.45 ", " 12jk"])
    def test_malformed_number_starts_with_one_unknown_digit(
        self, lexer: Scanner, source: str
    ) -> None:
        token = first(lexer, source)
        assert token.tag == "Unknown"
        assert token.value == "1"

    @pytest.mark.parametrize("source, value", [
        (" '12341212' ", "12341212"),
        (" '12341212020202' ", "12341212020202"),
    ])
    def test_date(self, lexer: Scanner, source: str, value: str) -> None:
        token = first(lexer, source)
        assert token.tag == "Date"
        assert token.value == value

    def test_date_with_wrong_digit_count_is_not_a_date(self, lexer: Scanner) -> None:
        token = first(lexer, "'123'")
        assert token.tag == "Unknown"
        assert token.value == "'"


# ---------------------------------------------------------------------------
# Operators, preprocessor and directives
# ---------------------------------------------------------------------------


def test_operators(lexer: Scanner) -> None:
    source = " + - * / < > <= >= <> % ,.()[]"
    expected = ["+", "-", "*", "/", "<", ">", "<=", ">=", "<>", "%", ",", ".", "(", ")", "[", "]"]
    assert pairs(lexer, source) == [("Operator", op) for op in expected]


def test_preprocessor_instructions(lexer: Scanner) -> None:
    assert pairs(lexer, "#Если\n\t#КонецЕсли") == [
        ("Preprocessor", "Если"),
        ("Preprocessor", "КонецЕсли"),
    ]


def test_compilation_directive(lexer: Scanner) -> None:
    assert pairs(lexer, "&НаСервере\nПроцедура") == [
        ("Directive", "НаСервере"),
        ("Identifier", "Процедура"),
    ]


# ---------------------------------------------------------------------------
# Whole fragments
# ---------------------------------------------------------------------------


def test_code_walkthrough(lexer: Scanner) -> None:
    source = "\nА = Б+11.2 <>\n'20100207' - \"ffff\""
    tokens = lexer.parse(source)
    assert [(t.tag, t.value) for t in tokens] == [
        ("Identifier", "А"),
        ("Operator", "="),
        ("Identifier", "Б"),
        ("Operator", "+"),
        ("Number", "11.2"),
        ("Operator", "<>"),
        ("Date", "20100207"),
        ("Operator", "-"),
        ("String", "ffff"),
        ("EOF", ""),
    ]
    assert (tokens[0].line, tokens[0].column) == (2, 2)
    assert (tokens[4].line, tokens[4].column) == (2, 11)
    assert (tokens[6].line, tokens[6].column) == (3, 11)
    assert (tokens[8].line, tokens[8].column) == (3, 20)


def test_unknown_character_between_identifiers(lexer: Scanner) -> None:
    assert pairs(lexer, "\nА$Б") == [
        ("Identifier", "А"),
        ("Unknown", "$"),
        ("Identifier", "Б"),
    ]


def test_trailing_comments_leave_only_eof(lexer: Scanner) -> None:
    lexer.parse("а //comment\r\n// another comment")
    assert lexer.next_token() == Token("Identifier", "а", 1, 2, 0)
    eof = lexer.next_token()
    assert eof is not None
    assert eof.tag == "EOF"
    assert eof.value == ""
    assert lexer.next_token() is None


def test_comments_between_tokens_are_ignored(lexer: Scanner) -> None:
    assert pairs(lexer, "a //comment\r\n// another comment\r\nvalue") == [
        ("Identifier", "a"),
        ("Identifier", "value"),
    ]
