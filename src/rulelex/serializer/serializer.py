"""Token stream serialization for rulelex.

Converts token streams to and from plain dict/list structures that map
naturally to JSON and YAML.

Usage
-----
::

    from rulelex.serializer import TokenSerializer

    serializer = TokenSerializer(include_offset=True)
    json_text = serializer.to_json(tokens)
    tokens2 = serializer.from_json(json_text)
    assert tokens == tokens2
"""
from __future__ import annotations

import json
from collections.abc import Iterable

import yaml

from rulelex.grammar.tokens import Token


class TokenSerializer:
    """Converts between ``Token`` objects and plain Python dicts.

    Parameters
    ----------
    include_offset:
        When ``True`` each record also carries the token's ``offset``.
    """

    def __init__(self, include_offset: bool = False) -> None:
        self._include_offset = include_offset

    # ------------------------------------------------------------------
    # Serialization (tokens → dicts)
    # ------------------------------------------------------------------

    def to_dict(self, token: Token) -> dict[str, object]:
        """Serialize one token to a JSON-compatible dict."""
        data: dict[str, object] = {
            "tag": token.tag,
            "value": token.value,
            "line": token.line,
            "column": token.column,
        }
        if self._include_offset:
            data["offset"] = token.offset
        return data

    def to_list(self, tokens: Iterable[Token]) -> list[dict[str, object]]:
        """Serialize a token stream to a list of dicts, preserving order."""
        return [self.to_dict(t) for t in tokens]

    # ------------------------------------------------------------------
    # Deserialization (dicts → tokens)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, object]) -> Token:
        """Rebuild a ``Token`` from a dict produced by ``to_dict``."""
        return Token(
            tag=str(data["tag"]),
            value=str(data["value"]),
            line=int(data["line"]),  # type: ignore[arg-type]
            column=int(data["column"]),  # type: ignore[arg-type]
            offset=int(data.get("offset", 0)),  # type: ignore[arg-type]
        )

    def from_list(self, data: Iterable[dict[str, object]]) -> tuple[Token, ...]:
        return tuple(self.from_dict(item) for item in data)

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, tokens: Iterable[Token], indent: int | None = 2) -> str:
        """Serialize a token stream to a JSON array."""
        return json.dumps(self.to_list(tokens), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> tuple[Token, ...]:
        data: list[dict[str, object]] = json.loads(text)
        return self.from_list(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, tokens: Iterable[Token]) -> str:
        """Serialize a token stream to a YAML sequence."""
        return yaml.dump(
            self.to_list(tokens),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def from_yaml(self, text: str) -> tuple[Token, ...]:
        data: list[dict[str, object]] = yaml.safe_load(text) or []
        return self.from_list(data)
