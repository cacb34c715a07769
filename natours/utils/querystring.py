"""
Bracket-style query string parsing.

Keys such as ``price[gte]=500`` nest into ``{"price": {"gte": "500"}}`` and
repeated keys collect into lists, the way extended urlencoded parsers on
the web do it. ``encode_query`` turns the structure back into a string.
"""

import re
from typing import Any
from urllib.parse import parse_qsl, quote

# Nesting deeper than this keeps the remainder of the key as a literal
MAX_DEPTH = 5
# Upper bound on parameters processed from a single query string
MAX_PARAMS = 1000

_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def split_key(key: str) -> list[str]:
    """Split ``a[b][c]`` into ``["a", "b", "c"]``."""
    bracket = key.find("[")
    if bracket <= 0:
        return [key]

    parts = [key[:bracket]]
    rest = key[bracket:]
    pos = 0
    while pos < len(rest) and len(parts) <= MAX_DEPTH:
        match = _SEGMENT.match(rest, pos)
        if not match:
            break
        parts.append(match.group(1))
        pos = match.end()
    if pos < len(rest):
        parts.append(rest[pos:])
    return parts


def _assign(target: dict, parts: list[str], value: str) -> None:
    head, tail = parts[0], parts[1:]

    if not tail:
        if head in target:
            existing = target[head]
            if isinstance(existing, list):
                existing.append(value)
            elif isinstance(existing, dict):
                existing[str(len(existing))] = value
            else:
                target[head] = [existing, value]
        else:
            target[head] = value
        return

    child = target.get(head)
    if tail[0] == "" and len(tail) == 1:
        # a[]=x appends
        if child is None:
            target[head] = [value]
        elif isinstance(child, list):
            child.append(value)
        elif isinstance(child, dict):
            child[str(len(child))] = value
        else:
            target[head] = [child, value]
        return

    if isinstance(child, list):
        child = {str(i): item for i, item in enumerate(child)}
        target[head] = child
    elif not isinstance(child, dict):
        child = {} if child is None else {"0": child}
        target[head] = child
    _assign(child, tail, value)


def parse_query(query: str) -> dict[str, Any]:
    """Parse a query string or urlencoded body into a nested dict."""
    result: dict[str, Any] = {}
    pairs = parse_qsl(query, keep_blank_values=True)[:MAX_PARAMS]
    for key, value in pairs:
        if not key:
            continue
        _assign(result, split_key(key), value)
    return result


def _flatten(prefix: str, value: Any, nested: bool = False) -> list[tuple[str, str]]:
    if isinstance(value, dict):
        pairs = []
        for key, item in value.items():
            pairs.extend(_flatten(f"{prefix}[{key}]", item, nested=True))
        return pairs
    if isinstance(value, list):
        pairs = []
        for index, item in enumerate(value):
            if isinstance(item, (dict, list)):
                pairs.extend(_flatten(f"{prefix}[{index}]", item, nested=True))
            else:
                # Top-level lists repeat the key; nested ones need brackets
                pairs.append((f"{prefix}[]" if nested else prefix, _scalar(item)))
        return pairs
    return [(prefix, _scalar(value))]


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query(data: dict[str, Any]) -> str:
    """Encode a nested dict back into a bracket-style query string."""
    pairs: list[tuple[str, str]] = []
    for key, value in data.items():
        pairs.extend(_flatten(str(key), value))
    return "&".join(
        f"{quote(key, safe='[]')}={quote(value, safe='')}" for key, value in pairs
    )
