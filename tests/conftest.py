"""Shared test fixtures for rulelex.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from rulelex.grammar.rules import RuleSet
from rulelex.loader import load_builtin, rules_from_records

# A small language: identifiers, numbers, quoted strings, a few operators,
# whitespace and line comments suppressed.
SIMPLE_RECORDS: list[dict[str, object]] = [
    {"name": "Whitespace", "pattern": r"\s+", "delete": True},
    {"name": "Comment", "pattern": r"//[^\n]*", "delete": True},
    {
        "name": "String",
        "pattern": r'"[^"]*"',
        "replaces": [{"pattern": r'^"|"$', "replace": ""}],
    },
    {"name": "Number", "pattern": r"\d+(?:\.\d+)?(?![\w.])"},
    {"name": "Identifier", "pattern": r"[A-Za-z_]\w*"},
    {"name": "Operator", "pattern": r"[-+*/=()]"},
]


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "rulelex"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def simple_rules() -> RuleSet:
    """Compiled rule set for the small test language."""
    return rules_from_records(SIMPLE_RECORDS)


@pytest.fixture(scope="session")
def rules_1c() -> RuleSet:
    """The bundled 1C:Enterprise rule set."""
    return load_builtin("1c")
