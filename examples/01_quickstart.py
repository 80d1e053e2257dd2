#!/usr/bin/env python3
"""Example: Quickstart for rulelex

Minimal working example: compile a tiny rule set, tokenize a string,
then tokenize a 1C fragment with the bundled rule set and walk the
stream with the pull cursor.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install rulelex
"""
from __future__ import annotations

import rulelex
from rulelex.lexer import Scanner

RULES = [
    {"name": "Space", "pattern": r"\s+", "delete": True},
    {"name": "Comment", "pattern": r"#[^\n]*", "delete": True},
    {"name": "Number", "pattern": r"\d+(?:\.\d+)?"},
    {"name": "Name", "pattern": r"[A-Za-z_]\w*"},
    {"name": "Op", "pattern": r"[-+*/=()]"},
]

SOURCE_1C = '''
Процедура Привет() Экспорт
    // приветствие
    Сообщить("Привет,
    |мир!");
КонецПроцедуры
'''


def main() -> None:
    print(f"rulelex version: {rulelex.__version__}")

    # Step 1: Compile rules from plain records
    rules = rulelex.compile_rules(RULES)
    print(f"Compiled rules: {', '.join(rules.names())}")

    # Step 2: Tokenize; unmatched input becomes Unknown tokens
    for token in rulelex.tokenize(rules, "total = price * 1.2  # with tax\n$"):
        print(f"  {token.tag:<8} {token.value!r:<10} {token.line}:{token.column}")

    # Step 3: Bundled 1C rules and the pull cursor
    scanner = Scanner(rulelex.load_builtin("1c"))
    scanner.parse(SOURCE_1C)
    print("1C tokens:")
    token = scanner.next_token()
    while token is not None:
        print(f"  {token!r}")
        token = scanner.next_token()


if __name__ == "__main__":
    main()
