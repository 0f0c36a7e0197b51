"""Query parsing and value helpers."""

from .helpers import UNDEFINED, pick, reject_undefined, resource_key, split_csv, to_int
from .query_params import parse_query_params

__all__ = [
    "UNDEFINED",
    "parse_query_params",
    "pick",
    "reject_undefined",
    "resource_key",
    "split_csv",
    "to_int",
]
