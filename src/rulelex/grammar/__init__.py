"""rulelex grammar module.

Exports the token model, the rule model and construction-time errors.
"""
from __future__ import annotations

from rulelex.grammar.errors import (
    RuleCompileError,
    RuleDefinitionError,
    RuleError,
    RuleSetNotFoundError,
)
from rulelex.grammar.rules import (
    Normalizer,
    NormalizerDefinition,
    Rule,
    RuleDefinition,
    RuleSet,
    compile_rule,
)
from rulelex.grammar.tokens import EOF_TAG, RESERVED_TAGS, UNKNOWN_TAG, Token

__all__ = [
    # Tokens
    "Token",
    "UNKNOWN_TAG",
    "EOF_TAG",
    "RESERVED_TAGS",
    # Rules
    "RuleDefinition",
    "NormalizerDefinition",
    "Rule",
    "Normalizer",
    "RuleSet",
    "compile_rule",
    # Errors
    "RuleError",
    "RuleCompileError",
    "RuleDefinitionError",
    "RuleSetNotFoundError",
]
