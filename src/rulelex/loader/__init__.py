"""rulelex loader module.

Exports the functions that read rule definition documents and compile
them into ``RuleSet`` objects.
"""
from __future__ import annotations

from rulelex.loader.loader import (
    builtin_names,
    load_builtin,
    load_rules,
    loads_rules,
    parse_record,
    rules_from_records,
)

__all__ = [
    "load_rules",
    "loads_rules",
    "rules_from_records",
    "parse_record",
    "load_builtin",
    "builtin_names",
]
