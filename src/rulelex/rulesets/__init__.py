"""Rule sets bundled with rulelex, one JSON document per language."""
