"""rulelex Scanner: converts raw text into a flat stream of tokens.

The scanner is a single-pass loop driven entirely by a ``RuleSet``. At
every offset it asks the rule set for the first rule matching at the
cursor and classifies the outcome as one of three step results:

    - ``Matched``      a rule matched; a token is emitted
    - ``Suppressed``   a ``delete`` rule matched; the text is consumed silently
    - ``Unrecognized`` nothing matched; one character becomes an ``Unknown`` token

Scanning never raises on input. Unmatched characters surface as
``Unknown`` tokens so a downstream parser can report them with their
position, and every stream ends with exactly one ``EOF`` token.

Token positions are the line/column reached *after* consuming the
token's text, counted in characters.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Union

from rulelex.grammar.rules import Rule, RuleSet
from rulelex.grammar.tokens import EOF_TAG, UNKNOWN_TAG, Token

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_RECOVERY_WHITESPACE: Final[frozenset[str]] = frozenset("\n\t\r ")


class RecoveryPolicy(Enum):
    """How positions are counted while skipping unmatched input.

    NEWLINE_ONLY
        Same accounting as matched text: only ``\\n`` starts a new line,
        every other consumed character (the unknown one included) moves
        the column by one.
    LEGACY
        Compatibility accounting for older tooling: every
        whitespace character skipped during recovery moves the line
        counter, only ``\\n`` resets the column, and the unknown
        character itself does not move the column.
    """

    NEWLINE_ONLY = auto()
    LEGACY = auto()


# ---------------------------------------------------------------------------
# Step results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Matched:
    """A rule matched at ``start`` and its token is emitted."""

    rule: Rule
    text: str
    value: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Suppressed:
    """A suppressing rule matched at ``start``; no token is emitted."""

    rule: Rule
    text: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """No rule matched at ``start``.

    ``skipped`` is the whitespace consumed before the unknown character,
    ``value`` the unknown character itself (empty if input ran out).
    """

    skipped: str
    value: str
    start: int
    end: int

    @property
    def offset(self) -> int:
        return self.end - len(self.value)


Step = Union[Matched, Suppressed, Unrecognized]


def _advance(text: str, line: int, column: int) -> tuple[int, int]:
    """Return the position reached after consuming ``text``."""
    newlines = text.count("\n")
    if newlines:
        return line + newlines, len(text) - text.rfind("\n")
    return line, column + len(text)


class Scanner:
    """Rule-driven scanner with a pull cursor over its latest token stream.

    A scanner is bound to one ``RuleSet`` and may be invoked any number
    of times. Each call to ``parse`` produces a fresh immutable tuple of
    tokens and resets the cursor to its start. A single instance must not
    be shared between threads; create one scanner per concurrent input
    (they can all share the same ``RuleSet``).

    Parameters
    ----------
    rules:
        The compiled rule set, in priority order.
    recovery:
        Position accounting used while skipping unmatched input.
    """

    __slots__ = ("_rules", "_recovery", "_tokens", "_next")

    def __init__(
        self,
        rules: RuleSet,
        *,
        recovery: RecoveryPolicy = RecoveryPolicy.NEWLINE_ONLY,
    ) -> None:
        self._rules: RuleSet = rules
        self._recovery: RecoveryPolicy = recovery
        self._tokens: tuple[Token, ...] = ()
        self._next: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def recovery(self) -> RecoveryPolicy:
        return self._recovery

    @property
    def tokens(self) -> tuple[Token, ...]:
        """The complete token stream of the latest scan."""
        return self._tokens

    def parse(self, source: str | bytes, encoding: str = "utf-8") -> tuple[Token, ...]:
        """Scan ``source`` completely and return its token stream.

        ``bytes`` input is decoded with ``encoding``; undecodable bytes
        are replaced rather than rejected so scanning stays total.

        Returns
        -------
        tuple[Token, ...]
            Ordered tokens, suppressed matches excluded, always terminated
            by a single ``EOF`` token.
        """
        if isinstance(source, (bytes, bytearray)):
            text = bytes(source).decode(encoding, errors="replace")
        else:
            text = source

        tokens: list[Token] = []
        line, column = 1, 1
        pos = 0
        end = len(text)
        unknown = 0

        while pos < end:
            step = self.step(text, pos)
            if isinstance(step, Unrecognized):
                line, column = self._recover(step, line, column)
                tokens.append(Token(UNKNOWN_TAG, step.value, line, column, step.offset))
                unknown += 1
            else:
                line, column = _advance(step.text, line, column)
                if isinstance(step, Matched):
                    tokens.append(Token(step.rule.name, step.value, line, column, step.start))
            pos = step.end

        tokens.append(Token(EOF_TAG, "", line, column, end))

        self._tokens = tuple(tokens)
        self._next = 0
        logger.debug(
            "Scanned %d character(s) into %d token(s), %d unknown",
            end,
            len(self._tokens),
            unknown,
        )
        return self._tokens

    def next_token(self) -> Token | None:
        """Return the next unconsumed token, or ``None`` once exhausted."""
        if self._next >= len(self._tokens):
            return None
        token = self._tokens[self._next]
        self._next += 1
        return token

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def step(self, text: str, pos: int) -> Step:
        """Classify the input at ``pos`` without touching scanner state."""
        found = self._rules.find(text, pos)
        if found is not None:
            rule, m = found
            raw = m.group()
            if rule.suppress:
                return Suppressed(rule, raw, pos, m.end())
            return Matched(rule, raw, rule.normalize(raw), pos, m.end())

        i = pos
        end = len(text)
        while i < end and text[i] in _RECOVERY_WHITESPACE:
            i += 1
        if i < end:
            return Unrecognized(text[pos:i], text[i], pos, i + 1)
        return Unrecognized(text[pos:i], "", pos, i)

    def _recover(self, step: Unrecognized, line: int, column: int) -> tuple[int, int]:
        if self._recovery is RecoveryPolicy.NEWLINE_ONLY:
            return _advance(step.skipped + step.value, line, column)
        for ch in step.skipped:
            line += 1
            if ch == "\n":
                column = 1
        return line, column

    def __repr__(self) -> str:
        return f"Scanner(rules={len(self._rules)}, recovery={self._recovery.name})"


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def tokenize(
    rules: RuleSet,
    source: str | bytes,
    *,
    recovery: RecoveryPolicy = RecoveryPolicy.NEWLINE_ONLY,
) -> tuple[Token, ...]:
    """Tokenize ``source`` with ``rules`` and return the complete token stream.

    Example
    -------
    ::

        from rulelex.loader import load_builtin
        from rulelex.lexer import tokenize
        tokens = tokenize(load_builtin("1c"), 'А = "text"')
    """
    return Scanner(rules, recovery=recovery).parse(source)
