"""rulelex: rule-driven lexical scanner.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import rulelex

    # Compile a rule set from plain records
    rules = rulelex.compile_rules([
        {"name": "Space", "pattern": r"\\s+", "delete": True},
        {"name": "Number", "pattern": r"\\d+"},
        {"name": "Word", "pattern": r"[A-Za-z]+"},
    ])

    # Tokenize a string; the stream always ends with an EOF token
    tokens = rulelex.tokenize(rules, "abc 42 $")
    # (Word 'abc', Number '42', Unknown '$', EOF '')

    # Or load a bundled rule set
    rules_1c = rulelex.load_builtin("1c")

    rulelex.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from pathlib import Path

    from rulelex.grammar.rules import RuleSet
    from rulelex.grammar.tokens import Token
    from rulelex.lexer.lexer import RecoveryPolicy


def compile_rules(records: Any) -> "RuleSet":
    """Validate and compile rule records into a ``RuleSet``.

    Parameters
    ----------
    records:
        A list of ``{name, pattern, delete, replaces}`` mappings, or a
        mapping with a ``rules`` key holding that list.

    Raises
    ------
    rulelex.grammar.RuleDefinitionError
        If a record is malformed.
    rulelex.grammar.RuleCompileError
        If a pattern cannot be compiled.
    """
    from rulelex.loader.loader import rules_from_records

    return rules_from_records(records)


def load_rules(path: "str | Path") -> "RuleSet":
    """Load and compile a JSON or YAML rule file."""
    from rulelex.loader.loader import load_rules as _load_rules

    return _load_rules(path)


def load_builtin(name: str) -> "RuleSet":
    """Load a rule set bundled with rulelex, e.g. ``"1c"``."""
    from rulelex.loader.loader import load_builtin as _load_builtin

    return _load_builtin(name)


def tokenize(
    rules: "RuleSet",
    source: str | bytes,
    *,
    recovery: "RecoveryPolicy | None" = None,
) -> tuple["Token", ...]:
    """Tokenize ``source`` with ``rules`` and return the complete token stream.

    Parameters
    ----------
    rules:
        A compiled rule set.
    source:
        Text to scan; ``bytes`` are decoded as UTF-8.
    recovery:
        Position accounting for unmatched input. Defaults to
        ``RecoveryPolicy.NEWLINE_ONLY``.

    Returns
    -------
    tuple[Token, ...]
        Ordered tokens terminated by a single ``EOF`` token.
    """
    from rulelex.lexer.lexer import RecoveryPolicy as _RecoveryPolicy
    from rulelex.lexer.lexer import tokenize as _tokenize

    return _tokenize(rules, source, recovery=recovery or _RecoveryPolicy.NEWLINE_ONLY)


__all__ = [
    "__version__",
    "compile_rules",
    "load_rules",
    "load_builtin",
    "tokenize",
]
