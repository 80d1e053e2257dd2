"""rulelex serializer module.

Exports ``TokenSerializer`` for converting token streams to and from
JSON/YAML.
"""
from __future__ import annotations

from rulelex.serializer.serializer import TokenSerializer

__all__ = ["TokenSerializer"]
