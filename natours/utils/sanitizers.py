"""Payload sanitization helpers used by the sanitizing middleware."""

import re
from collections.abc import Iterable
from typing import Any, Optional

import bleach

# Keys that a document database would interpret as operators or paths
_OPERATOR_KEY = re.compile(r"^\$|\.")


def has_operator_key(key: Any) -> bool:
    """Check whether a key starts with ``$`` or contains ``.``."""
    return isinstance(key, str) and bool(_OPERATOR_KEY.search(key))


def strip_mongo_operators(
    value: Any, replace_with: Optional[str] = None
) -> tuple[Any, bool]:
    """
    Remove operator keys from a nested structure.

    Args:
        value: Parsed body or query (dicts, lists and scalars)
        replace_with: Replace ``$``/``.`` in offending keys instead of dropping them

    Returns:
        Tuple of (sanitized value, whether anything changed)
    """
    if isinstance(value, dict):
        changed = False
        cleaned = {}
        for key, item in value.items():
            item, item_changed = strip_mongo_operators(item, replace_with)
            changed = changed or item_changed
            if has_operator_key(key):
                changed = True
                if replace_with is None:
                    continue
                key = _OPERATOR_KEY.sub(replace_with, key)
                if key in value or key in cleaned:
                    continue
            cleaned[key] = item
        return cleaned, changed

    if isinstance(value, list):
        changed = False
        cleaned_items = []
        for item in value:
            item, item_changed = strip_mongo_operators(item, replace_with)
            changed = changed or item_changed
            cleaned_items.append(item)
        return cleaned_items, changed

    return value, False


# bleach escapes every markup character; only "<" can open a tag, so the
# rest go back to their literal form
_RESTORED_ENTITIES = (("&gt;", ">"), ("&amp;", "&"))


def escape_markup(text: str) -> str:
    """Escape every HTML tag in a string, keeping its text visible."""
    if "<" not in text:
        return text
    cleaned = bleach.clean(text, tags=[], attributes={}, strip=False)
    for entity, char in _RESTORED_ENTITIES:
        cleaned = cleaned.replace(entity, char)
    return cleaned


def clean_xss(value: Any) -> Any:
    """Recursively escape markup in every string, dict keys included."""
    if isinstance(value, str):
        return escape_markup(value)
    if isinstance(value, dict):
        return {
            escape_markup(key) if isinstance(key, str) else key: clean_xss(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [clean_xss(item) for item in value]
    return value


def collapse_polluted_params(
    params: dict[str, Any], whitelist: Iterable[str] = ()
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Keep only the last value of repeated top-level parameters.

    Args:
        params: Parsed query or urlencoded body
        whitelist: Names that may legitimately repeat

    Returns:
        Tuple of (cleaned params, polluted originals keyed by name)
    """
    allowed = set(whitelist)
    cleaned: dict[str, Any] = {}
    polluted: dict[str, Any] = {}
    for key, value in params.items():
        if isinstance(value, list) and key not in allowed:
            polluted[key] = value
            cleaned[key] = value[-1] if value else ""
        else:
            cleaned[key] = value
    return cleaned, polluted
