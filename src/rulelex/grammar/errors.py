"""Construction-time error types.

Scanning itself never fails: unmatched input degrades to ``Unknown``
tokens. The only hard failures happen while a rule set is being built,
and they all derive from ``RuleError`` so callers can catch them together.
"""
from __future__ import annotations


class RuleError(Exception):
    """Base class for every error raised while building a rule set."""


class RuleCompileError(RuleError, ValueError):
    """Raised when a rule or normalizer pattern cannot be used.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    rule_index:
        0-based position of the offending rule in declaration order.
    rule_name:
        Name of the offending rule.
    pattern:
        The pattern text that was rejected.
    """

    def __init__(
        self,
        message: str,
        rule_index: int,
        rule_name: str,
        pattern: str,
    ) -> None:
        super().__init__(
            f"Rule #{rule_index} ({rule_name!r}): {message} in pattern {pattern!r}"
        )
        self.compile_message = message
        self.rule_index = rule_index
        self.rule_name = rule_name
        self.pattern = pattern


class RuleDefinitionError(RuleError, ValueError):
    """Raised when a rule definition record or document is malformed.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    index:
        0-based index of the offending record, or ``None`` when the
        problem concerns the document as a whole.
    field:
        Name of the offending field, if any.
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        field: str | None = None,
    ) -> None:
        location = ""
        if index is not None:
            location = f"record #{index}"
            if field is not None:
                location += f", field {field!r}"
            location += ": "
        super().__init__(f"{location}{message}")
        self.definition_message = message
        self.index = index
        self.field = field


class RuleSetNotFoundError(RuleError, KeyError):
    """Raised when a bundled rule set name is not known."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.ruleset_name = name
        self.available = available
        super().__init__(
            f"Rule set {name!r} is not bundled with rulelex. "
            f"Available rule sets: {', '.join(available) or '(none)'}."
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])
