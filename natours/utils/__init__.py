"""Utility functions and helpers."""

from natours.utils.network import get_client_ip
from natours.utils.querystring import encode_query, parse_query
from natours.utils.sanitizers import (
    clean_xss,
    collapse_polluted_params,
    strip_mongo_operators,
)

__all__ = [
    "clean_xss",
    "collapse_polluted_params",
    "encode_query",
    "get_client_ip",
    "parse_query",
    "strip_mongo_operators",
]
