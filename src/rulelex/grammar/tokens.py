"""Token definitions for the rule-driven scanner.

Every scanned token is a ``Token`` dataclass that carries its tag, the
normalized value, and the source position reached after consuming it.
Tags come from rule names, except for the two reserved tags produced by
the scanner itself: ``Unknown`` for characters no rule recognizes and
``EOF`` for the sentinel that closes every stream.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

UNKNOWN_TAG: Final[str] = "Unknown"
EOF_TAG: Final[str] = "EOF"

# Tags a rule definition may not claim for itself.
RESERVED_TAGS: Final[frozenset[str]] = frozenset({UNKNOWN_TAG, EOF_TAG})


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token with source-location metadata.

    Parameters
    ----------
    tag:
        Name of the rule that produced the token, or one of the reserved
        tags ``Unknown`` / ``EOF``.
    value:
        The matched text after the rule's normalizers were applied.
    line:
        1-based line number reached after consuming the token.
    column:
        1-based column number reached after consuming the token.
    offset:
        0-based character offset where the consumed span started.
    """

    tag: str
    value: str
    line: int
    column: int
    offset: int = 0

    def __repr__(self) -> str:
        return f"Token({self.tag}, {self.value!r}, {self.line}:{self.column})"

    @property
    def is_unknown(self) -> bool:
        """Return True if this token is a recovery token for unmatched input."""
        return self.tag == UNKNOWN_TAG

    @property
    def is_eof(self) -> bool:
        """Return True if this token is the end-of-stream sentinel."""
        return self.tag == EOF_TAG
