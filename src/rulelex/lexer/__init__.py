"""rulelex lexer module.

Exports the ``Scanner`` class, the ``tokenize`` convenience function and
the step result types.
"""
from __future__ import annotations

from rulelex.lexer.lexer import (
    Matched,
    RecoveryPolicy,
    Scanner,
    Step,
    Suppressed,
    Unrecognized,
    tokenize,
)

__all__ = [
    "Scanner",
    "tokenize",
    "RecoveryPolicy",
    "Step",
    "Matched",
    "Suppressed",
    "Unrecognized",
]
