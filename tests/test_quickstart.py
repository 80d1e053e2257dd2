"""Test that the quickstart API works for rulelex."""
from __future__ import annotations


def test_quickstart_imports(package_name: str) -> None:
    import importlib

    rulelex = importlib.import_module(package_name)
    assert callable(rulelex.compile_rules)
    assert callable(rulelex.tokenize)
    assert callable(rulelex.load_rules)
    assert callable(rulelex.load_builtin)


def test_version(expected_version: str) -> None:
    import rulelex

    assert rulelex.__version__ == expected_version


def test_quickstart_compile_and_tokenize() -> None:
    import rulelex

    rules = rulelex.compile_rules([
        {"name": "Space", "pattern": r"\s+", "delete": True},
        {"name": "Number", "pattern": r"\d+"},
        {"name": "Word", "pattern": r"[A-Za-z]+"},
    ])
    tokens = rulelex.tokenize(rules, "abc 42 $")
    assert [(t.tag, t.value) for t in tokens] == [
        ("Word", "abc"),
        ("Number", "42"),
        ("Unknown", "$"),
        ("EOF", ""),
    ]


def test_quickstart_legacy_recovery() -> None:
    import rulelex
    from rulelex.lexer import RecoveryPolicy

    rules = rulelex.compile_rules([{"name": "Word", "pattern": r"[a-z]+"}])
    tokens = rulelex.tokenize(rules, "a $", recovery=RecoveryPolicy.LEGACY)
    assert (tokens[1].line, tokens[1].column) == (2, 2)


def test_quickstart_builtin() -> None:
    import rulelex

    tokens = rulelex.tokenize(rulelex.load_builtin("1c"), 'Текст = "привет";')
    assert [t.tag for t in tokens] == ["Identifier", "Operator", "String", "Operator", "EOF"]
    assert tokens[2].value == "привет"


def test_quickstart_load_rules_file(tmp_path) -> None:
    import rulelex

    path = tmp_path / "words.yaml"
    path.write_text("- name: Word\n  pattern: '[a-z]+'\n", encoding="utf-8")
    rules = rulelex.load_rules(path)
    assert rulelex.tokenize(rules, b"hi")[0].value == "hi"
