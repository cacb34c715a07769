"""Filtering, sorting, field limiting and pagination for list endpoints."""

from dataclasses import dataclass, field
from typing import Any, Optional

# Query keys that control the listing rather than filter it
RESERVED_PARAMS = {"page", "sort", "limit", "fields"}

# Comparison operators accepted as ``field[op]=value``
OPERATORS = {"gte", "gt", "lte", "lt", "ne"}

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000


def coerce(value: Any) -> Any:
    """Convert numeric and boolean query strings to Python values."""
    if not isinstance(value, str):
        return value
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _compare(actual: Any, op: str, expected: Any) -> bool:
    if op == "ne":
        return actual != expected
    if actual is None:
        return False
    try:
        if op == "gte":
            return actual >= expected
        if op == "gt":
            return actual > expected
        if op == "lte":
            return actual <= expected
        if op == "lt":
            return actual < expected
    except TypeError:
        return False
    return False


def _match_value(actual: Any, condition: Any) -> bool:
    if isinstance(condition, dict):
        return all(
            _compare(actual, op, coerce(expected))
            for op, expected in condition.items()
            if op in OPERATORS
        )
    if isinstance(condition, list):
        return any(_match_value(actual, item) for item in condition)
    return actual == condition or actual == coerce(condition)


def matches(doc: dict[str, Any], filters: dict[str, Any]) -> bool:
    """Check whether a document satisfies every filter."""
    return all(_match_value(doc.get(key), condition) for key, condition in filters.items())


def _csv(value: Any) -> list[str]:
    if isinstance(value, list):
        value = ",".join(str(v) for v in value)
    return [part.strip() for part in str(value).split(",") if part.strip()]


class _Reversed:
    """Wrapper inverting comparisons for descending sort keys."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __lt__(self, other: "_Reversed") -> bool:
        return other.value < self.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Reversed) and self.value == other.value


@dataclass
class QueryFeatures:
    """Listing options parsed from a nested query dict."""

    filters: dict[str, Any] = field(default_factory=dict)
    sort: list[str] = field(default_factory=lambda: ["-createdAt"])
    fields: Optional[list[str]] = None
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_query(cls, query: dict[str, Any]) -> "QueryFeatures":
        filters = {k: v for k, v in query.items() if k not in RESERVED_PARAMS}

        features = cls(filters=filters)
        if query.get("sort"):
            features.sort = _csv(query["sort"])
        if query.get("fields"):
            features.fields = _csv(query["fields"])

        page = coerce(query.get("page", 1))
        limit = coerce(query.get("limit", DEFAULT_LIMIT))
        features.page = page if isinstance(page, int) and page > 0 else 1
        features.limit = (
            min(limit, MAX_LIMIT) if isinstance(limit, int) and limit > 0 else DEFAULT_LIMIT
        )
        return features

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def apply_sort(self, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        def key(doc: dict[str, Any]) -> tuple:
            parts = []
            for name in self.sort:
                value = doc.get(name.lstrip("-"))
                if value is None:
                    # Missing values sort last in either direction
                    parts.append((1, None))
                elif name.startswith("-"):
                    parts.append((0, _Reversed(value)))
                else:
                    parts.append((0, value))
            return tuple(parts)

        try:
            return sorted(docs, key=key)
        except TypeError:
            # Mixed value types in a sort field: keep insertion order
            return list(docs)

    def project(self, doc: dict[str, Any]) -> dict[str, Any]:
        """Limit a document to the requested fields; ``-name`` excludes."""
        if not self.fields:
            return doc
        excluded = {name[1:] for name in self.fields if name.startswith("-")}
        included = [name for name in self.fields if not name.startswith("-")]
        if included:
            return {k: v for k, v in doc.items() if k in included or k == "id"}
        return {k: v for k, v in doc.items() if k not in excluded}
