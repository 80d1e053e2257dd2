"""Unit tests for rulelex.serializer: token stream dumps to dict, JSON and YAML."""
from __future__ import annotations

import json

import yaml

from rulelex.grammar.tokens import Token
from rulelex.serializer import TokenSerializer

_TOKENS = (
    Token("Identifier", "Лев", 1, 4, 0),
    Token("Unknown", "$", 1, 5, 3),
    Token("EOF", "", 1, 5, 4),
)


class TestToDict:
    def test_default_record_has_four_fields(self) -> None:
        assert TokenSerializer().to_dict(_TOKENS[0]) == {
            "tag": "Identifier",
            "value": "Лев",
            "line": 1,
            "column": 4,
        }

    def test_offset_included_on_request(self) -> None:
        data = TokenSerializer(include_offset=True).to_dict(_TOKENS[1])
        assert data["offset"] == 3

    def test_list_preserves_order(self) -> None:
        tags = [d["tag"] for d in TokenSerializer().to_list(_TOKENS)]
        assert tags == ["Identifier", "Unknown", "EOF"]


class TestJson:
    def test_json_is_an_array_of_records(self) -> None:
        data = json.loads(TokenSerializer().to_json(_TOKENS))
        assert isinstance(data, list)
        assert data[-1] == {"tag": "EOF", "value": "", "line": 1, "column": 5}

    def test_json_keeps_non_ascii_text(self) -> None:
        assert "Лев" in TokenSerializer().to_json(_TOKENS)

    def test_json_round_trip_with_offsets(self) -> None:
        serializer = TokenSerializer(include_offset=True)
        assert serializer.from_json(serializer.to_json(_TOKENS)) == _TOKENS

    def test_missing_offset_defaults_to_zero(self) -> None:
        serializer = TokenSerializer()
        restored = serializer.from_json(serializer.to_json(_TOKENS))
        assert [t.offset for t in restored] == [0, 0, 0]


class TestYaml:
    def test_yaml_keeps_field_order(self) -> None:
        text = TokenSerializer().to_yaml(_TOKENS[:1])
        assert text.index("tag:") < text.index("value:") < text.index("line:")

    def test_yaml_loads_back(self) -> None:
        data = yaml.safe_load(TokenSerializer().to_yaml(_TOKENS))
        assert data[0]["value"] == "Лев"

    def test_empty_yaml_document(self) -> None:
        assert TokenSerializer().from_yaml("") == ()
