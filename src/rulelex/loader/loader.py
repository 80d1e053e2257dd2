"""Rule loading: turn rule definition documents into compiled rule sets.

A rule document is a list of records (or a mapping whose ``rules`` key
holds that list). Each record has the shape::

    {
        "name": "String",
        "pattern": "\\"[^\\"]*\\"",
        "delete": false,
        "replaces": [{"pattern": "^\\"|\\"$", "replace": ""}]
    }

``delete`` and ``replaces`` are optional. Documents are read from JSON
or YAML files, from plain Python data, or from the rule sets bundled in
``rulelex.rulesets``.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from importlib import resources
from pathlib import Path
from typing import Any, Final

import yaml

from rulelex.grammar.errors import RuleDefinitionError, RuleSetNotFoundError
from rulelex.grammar.rules import NormalizerDefinition, RuleDefinition, RuleSet

logger = logging.getLogger(__name__)

_BUILTIN_PACKAGE: Final[str] = "rulelex.rulesets"
_JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})
_YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------


def _require_str(record: Mapping[str, Any], key: str, index: int) -> str:
    if key not in record:
        raise RuleDefinitionError("missing required field", index, key)
    value = record[key]
    if not isinstance(value, str):
        raise RuleDefinitionError(
            f"expected a string, got {type(value).__name__}", index, key
        )
    return value


def _parse_replaces(raw: Any, index: int) -> tuple[NormalizerDefinition, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        raise RuleDefinitionError("expected a list of replacements", index, "replaces")
    replaces: list[NormalizerDefinition] = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise RuleDefinitionError(
                "each replacement must be a mapping with 'pattern' and 'replace'",
                index,
                "replaces",
            )
        pattern = item.get("pattern")
        replace = item.get("replace", "")
        if not isinstance(pattern, str) or not isinstance(replace, str):
            raise RuleDefinitionError(
                "replacement 'pattern' and 'replace' must be strings",
                index,
                "replaces",
            )
        replaces.append(NormalizerDefinition(pattern=pattern, replace=replace))
    return tuple(replaces)


def parse_record(record: Any, index: int) -> RuleDefinition:
    """Validate one raw record and return its ``RuleDefinition``.

    Raises
    ------
    RuleDefinitionError
        If the record is not a mapping or a field is missing or mistyped.
    """
    if not isinstance(record, Mapping):
        raise RuleDefinitionError(
            f"expected a mapping, got {type(record).__name__}", index
        )
    name = _require_str(record, "name", index)
    if not name:
        raise RuleDefinitionError("rule name must not be empty", index, "name")
    pattern = _require_str(record, "pattern", index)
    delete = record.get("delete", False)
    if not isinstance(delete, bool):
        raise RuleDefinitionError(
            f"expected a boolean, got {type(delete).__name__}", index, "delete"
        )
    return RuleDefinition(
        name=name,
        pattern=pattern,
        delete=delete,
        replaces=_parse_replaces(record.get("replaces"), index),
    )


def _records_of(document: Any) -> Sequence[Any]:
    if isinstance(document, Mapping):
        if "rules" not in document:
            raise RuleDefinitionError("rule document mapping has no 'rules' key")
        document = document["rules"]
    if not isinstance(document, Sequence) or isinstance(document, str):
        raise RuleDefinitionError("rule document must be a list of rule records")
    return document


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def rules_from_records(records: Any) -> RuleSet:
    """Validate and compile a rule document already loaded into Python data.

    Parameters
    ----------
    records:
        A list of rule records, or a mapping with a ``rules`` key.

    Raises
    ------
    RuleDefinitionError
        If the document or a record is malformed.
    RuleCompileError
        If a pattern cannot be compiled.
    """
    definitions = [
        parse_record(record, index) for index, record in enumerate(_records_of(records))
    ]
    return RuleSet(definitions)


def loads_rules(text: str, fmt: str = "json") -> RuleSet:
    """Parse a rule document from ``text`` in ``fmt`` (``json`` or ``yaml``)."""
    fmt = fmt.lower()
    if fmt == "json":
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RuleDefinitionError(f"invalid JSON rule document: {exc}") from exc
    elif fmt in ("yaml", "yml"):
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise RuleDefinitionError(f"invalid YAML rule document: {exc}") from exc
    else:
        raise RuleDefinitionError(f"unsupported rule document format {fmt!r}")
    return rules_from_records(document)


def load_rules(path: str | Path) -> RuleSet:
    """Load and compile a rule file (``.json``, ``.yaml`` or ``.yml``).

    Raises
    ------
    OSError
        If the file cannot be read.
    RuleDefinitionError
        If the extension is unsupported or the document is malformed.
    RuleCompileError
        If a pattern cannot be compiled.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in _JSON_SUFFIXES:
        fmt = "json"
    elif suffix in _YAML_SUFFIXES:
        fmt = "yaml"
    else:
        raise RuleDefinitionError(
            f"unsupported rule file extension {path.suffix!r} (expected .json, .yaml or .yml)"
        )
    ruleset = loads_rules(path.read_text(encoding="utf-8"), fmt)
    logger.debug("Loaded %d rule(s) from %s", len(ruleset), path)
    return ruleset


def builtin_names() -> list[str]:
    """Return the names of the rule sets bundled with rulelex, sorted."""
    package = resources.files(_BUILTIN_PACKAGE)
    return sorted(
        entry.name[: -len(".json")]
        for entry in package.iterdir()
        if entry.name.endswith(".json")
    )


def load_builtin(name: str) -> RuleSet:
    """Load one of the bundled rule sets by name (e.g. ``"1c"``).

    Raises
    ------
    RuleSetNotFoundError
        If no bundled rule set has that name.
    """
    resource = resources.files(_BUILTIN_PACKAGE) / f"{name}.json"
    if not resource.is_file():
        raise RuleSetNotFoundError(name, builtin_names())
    ruleset = loads_rules(resource.read_text(encoding="utf-8"), "json")
    logger.debug("Loaded bundled rule set %r (%d rule(s))", name, len(ruleset))
    return ruleset
