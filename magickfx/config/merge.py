from typing import Any, Dict, Optional


def merge_configs(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Deep-merge ``override`` onto ``base`` without mutating either.

    Nested mappings are merged key by key; any other value in ``override``
    (including ``None``) replaces the base value.
    """
    merged = dict(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged
