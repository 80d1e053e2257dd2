"""Rule model and the ordered rule set used by the scanner.

A rule definition is plain data: a tag name, a regular expression, a
``delete`` flag that suppresses token emission, and an ordered list of
``(pattern, replace)`` normalizers applied to the matched text. A
``RuleSet`` compiles every pattern of every definition once, up front,
and is immutable afterwards.

Matching is priority-ordered, not longest-match: ``RuleSet.find`` tries
rules in declaration order and the first one that matches at the cursor
wins. Every rule is implicitly anchored at the cursor, so no rule can
skip input between the cursor and the start of its match. A ``^`` or
``\\A`` written where a match begins (``^if|^else``, ``(?i)^if``) is
removed at compile time because it means "at the cursor"; one that
could only match at offset 0 of the input is a compile error.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from re import _constants as _sre
from re import _parser
from typing import Final

from rulelex.grammar.errors import RuleCompileError
from rulelex.grammar.tokens import RESERVED_TAGS

logger = logging.getLogger(__name__)

_START_ANCHORS: Final[frozenset[object]] = frozenset(
    {_sre.AT_BEGINNING, _sre.AT_BEGINNING_STRING}
)
_FLAG_GROUP: Final[re.Pattern[str]] = re.compile(r"\(\?[aiLmsux-]*([:)])")


# ---------------------------------------------------------------------------
# Definitions (uncompiled records)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NormalizerDefinition:
    """One ``(pattern, replace)`` pair of a rule definition."""

    pattern: str
    replace: str = ""


@dataclass(frozen=True)
class RuleDefinition:
    """An uncompiled rule as supplied by a rule loader.

    Parameters
    ----------
    name:
        Tag emitted for tokens produced by this rule.
    pattern:
        Python regular expression matched at the scan cursor.
    delete:
        When ``True`` the matched text is consumed without emitting a token.
    replaces:
        Normalizers applied in order to the matched text.
    """

    name: str
    pattern: str
    delete: bool = False
    replaces: tuple[NormalizerDefinition, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Compiled rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Normalizer:
    """A compiled substitution applied to matched text."""

    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


@dataclass(frozen=True, slots=True)
class Rule:
    """A compiled scanning rule.

    Parameters
    ----------
    name:
        Tag emitted for matches.
    pattern:
        Compiled match pattern, applied with ``Pattern.match`` at the cursor.
    suppress:
        When ``True`` matches are consumed but produce no token.
    normalizers:
        Substitutions applied in order to compute the token value.
    """

    name: str
    pattern: re.Pattern[str]
    suppress: bool = False
    normalizers: tuple[Normalizer, ...] = ()

    def normalize(self, raw: str) -> str:
        """Apply every normalizer in declared order to ``raw``."""
        value = raw
        for normalizer in self.normalizers:
            value = normalizer.apply(value)
        return value

    def match(self, text: str, pos: int) -> re.Match[str] | None:
        """Return the non-empty match of this rule starting at ``pos``, if any."""
        m = self.pattern.match(text, pos)
        if m is None or m.end() == pos:
            return None
        return m


# ---------------------------------------------------------------------------
# Start anchors
# ---------------------------------------------------------------------------


def _class_end(pattern: str, i: int) -> int:
    """Return the index just past the character class opening at ``i``."""
    j = i + 1
    if pattern.startswith("^", j):
        j += 1
    if pattern.startswith("]", j):
        j += 1
    while j < len(pattern) and pattern[j] != "]":
        j += 2 if pattern[j] == "\\" else 1
    return j + 1


def _group_head(pattern: str, i: int, leading: bool) -> tuple[int, bool | None]:
    """Return the end of the group opener at ``i`` and the leading state inside it.

    The state is ``None`` for a global flags group, which opens nothing.
    """
    if not pattern.startswith("(?", i):
        return i + 1, leading
    kind = pattern[i + 2:i + 3]
    if kind == "P":
        return pattern.index(">", i) + 1, leading
    if kind in (":", ">"):
        return i + 3, leading
    if kind in ("=", "!"):
        return i + 3, False
    if kind == "<":
        return i + 4, False
    if kind == "(":
        return pattern.index(")", i + 3) + 1, False
    m = _FLAG_GROUP.match(pattern, i)
    if m is None:
        return i + 2, leading
    if m.group(1) == ")":
        return m.end(), None
    return m.end(), leading


def _strip_cursor_anchors(pattern: str, verbose: bool = False) -> str:
    """Drop every ``^`` and ``\\A`` that sits where a match begins.

    Matching always starts at the cursor, so an anchor that precedes
    everything consumed in its alternative is redundant. Left in place,
    Python would only honour it at offset 0 of the input.
    """
    out: list[str] = []
    starts: list[bool] = []
    leading = True
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if verbose and c.isspace():
            out.append(c)
            i += 1
        elif verbose and c == "#":
            j = pattern.find("\n", i)
            j = n if j < 0 else j
            out.append(pattern[i:j])
            i = j
        elif c == "\\":
            if leading and pattern.startswith("\\A", i):
                i += 2
                continue
            out.append(pattern[i:i + 2])
            i += 2
            leading = False
        elif c == "^":
            if not leading:
                out.append(c)
            i += 1
        elif c == "[":
            j = _class_end(pattern, i)
            out.append(pattern[i:j])
            i = j
            leading = False
        elif pattern.startswith("(?#", i):
            j = pattern.index(")", i) + 1
            out.append(pattern[i:j])
            i = j
        elif pattern.startswith("(?P=", i):
            j = pattern.index(")", i) + 1
            out.append(pattern[i:j])
            i = j
            leading = False
        elif c == "(":
            j, inner = _group_head(pattern, i, leading)
            out.append(pattern[i:j])
            i = j
            if inner is not None:
                starts.append(inner)
                leading = inner
        elif c == ")":
            out.append(c)
            i += 1
            if starts:
                starts.pop()
            leading = False
        elif c == "|":
            out.append(c)
            i += 1
            leading = starts[-1] if starts else True
        else:
            out.append(c)
            i += 1
            leading = False
    return "".join(out)


def _nested_subpatterns(value: object) -> Iterator[_parser.SubPattern]:
    if isinstance(value, _parser.SubPattern):
        yield value
    elif isinstance(value, (tuple, list)):
        for item in value:
            yield from _nested_subpatterns(item)


def _has_stray_anchor(subpattern: _parser.SubPattern, leading: bool, multiline: bool) -> bool:
    """Report a start anchor that cannot match at the cursor.

    Under ``MULTILINE`` a ``^`` past the start of a match still matches
    after a newline and is accepted. Any other start anchor would only
    ever match at offset 0.
    """
    for op, av in subpattern:
        if op is _sre.AT and av in _START_ANCHORS:
            if leading or not (multiline and av is _sre.AT_BEGINNING):
                return True
            continue
        if op is _sre.BRANCH:
            stray = any(_has_stray_anchor(alt, leading, multiline) for alt in av[1])
        elif op is _sre.SUBPATTERN:
            _, add_flags, del_flags, inner = av
            scoped = (multiline or bool(add_flags & _sre.SRE_FLAG_MULTILINE)) and not (
                del_flags & _sre.SRE_FLAG_MULTILINE
            )
            stray = _has_stray_anchor(inner, leading, scoped)
        elif op is _sre.ATOMIC_GROUP:
            stray = _has_stray_anchor(av, leading, multiline)
        else:
            stray = any(
                _has_stray_anchor(sub, False, multiline) for sub in _nested_subpatterns(av)
            )
        if stray:
            return True
        leading = False
    return False


def _compile_match_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a rule pattern so that every start anchor means "at the cursor".

    Raises
    ------
    re.error
        If the pattern is invalid.
    ValueError
        If a start anchor is left that could only match at offset 0.
    """
    original = re.compile(pattern)
    source = _strip_cursor_anchors(pattern, bool(original.flags & re.VERBOSE))
    compiled = re.compile(source)
    if _has_stray_anchor(_parser.parse(source), True, bool(compiled.flags & re.MULTILINE)):
        raise ValueError("'^' or '\\A' after the start of a match never matches")
    return compiled


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def compile_rule(definition: RuleDefinition, index: int) -> Rule:
    """Compile a single rule definition.

    Raises
    ------
    RuleCompileError
        If the name is reserved, the match pattern is invalid, can
        match the empty string or holds a start anchor that can never
        match at the cursor, or a normalizer is invalid.
    """
    name = definition.name
    if name in RESERVED_TAGS:
        raise RuleCompileError(
            f"tag {name!r} is reserved for the scanner", index, name, definition.pattern
        )
    try:
        compiled = _compile_match_pattern(definition.pattern)
    except re.error as exc:
        raise RuleCompileError(
            f"invalid pattern ({exc})", index, name, definition.pattern
        ) from exc
    except ValueError as exc:
        raise RuleCompileError(str(exc), index, name, definition.pattern) from exc
    if compiled.match("") is not None:
        raise RuleCompileError(
            "pattern matches the empty string", index, name, definition.pattern
        )

    normalizers: list[Normalizer] = []
    for position, replace in enumerate(definition.replaces):
        try:
            norm_pattern = re.compile(replace.pattern)
            # Substituting into an empty string validates the replacement template.
            norm_pattern.sub(replace.replace, "")
        except re.error as exc:
            raise RuleCompileError(
                f"invalid normalizer #{position} ({exc})", index, name, replace.pattern
            ) from exc
        normalizers.append(Normalizer(norm_pattern, replace.replace))

    return Rule(
        name=name,
        pattern=compiled,
        suppress=definition.delete,
        normalizers=tuple(normalizers),
    )


class RuleSet:
    """An immutable, priority-ordered collection of compiled rules.

    Construction compiles every definition eagerly and atomically: if any
    pattern is rejected, ``RuleCompileError`` propagates and no rule set
    is created. A built ``RuleSet`` holds no per-scan state and may be
    shared by any number of scanners.

    Parameters
    ----------
    definitions:
        Rule definitions in priority order.
    """

    __slots__ = ("_rules",)

    def __init__(self, definitions: Iterable[RuleDefinition]) -> None:
        rules = tuple(
            compile_rule(definition, index)
            for index, definition in enumerate(definitions)
        )
        self._rules: tuple[Rule, ...] = rules
        logger.debug(
            "Compiled rule set: %d rule(s), %d suppressed",
            len(rules),
            sum(1 for r in rules if r.suppress),
        )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def find(self, text: str, pos: int = 0) -> tuple[Rule, re.Match[str]] | None:
        """Return the first rule, in declaration order, matching at ``pos``.

        Parameters
        ----------
        text:
            The complete input being scanned.
        pos:
            The cursor offset; matches must start exactly here.

        Returns
        -------
        tuple[Rule, re.Match[str]] | None
            The winning rule and its match, or ``None`` when no rule
            produces a non-empty match at ``pos``.
        """
        for rule in self._rules:
            m = rule.match(text, pos)
            if m is not None:
                return rule, m
        return None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def names(self) -> list[str]:
        """Return the rule names in priority order (duplicates included)."""
        return [rule.name for rule in self._rules]

    def get(self, name: str) -> Rule:
        """Return the highest-priority rule named ``name``.

        Raises
        ------
        KeyError
            If no rule has that name.
        """
        for rule in self._rules:
            if rule.name == name:
                return rule
        raise KeyError(name)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return any(rule.name == name for rule in self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({self.names()!r})"
