"""
normalizer.py - Display-safe normalization of empty values

Downstream search works on display strings, so null and absent values become
the searchable tokens "null" and "undefined" unless the caller opts out with
keep_primitive_value.
"""
from typing import Any, Dict, Iterable, List, Optional


class _Undefined:
    """Marker for a value that is absent rather than null"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNDEFINED"

    def __bool__(self):
        return False


UNDEFINED = _Undefined()

NULL_TEXT = "null"
UNDEFINED_TEXT = "undefined"


def normalize_value(value: Any, keep_primitive_value: bool = False) -> Any:
    if keep_primitive_value:
        return value
    if value is None:
        return NULL_TEXT
    if value is UNDEFINED:
        return UNDEFINED_TEXT
    return value


def normalize_record(
    record: Dict[str, Any],
    keep_primitive_value: bool = False,
    columns: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """
    Return a copy of record with empty values made display-safe.

    Args:
        record: The source record. Never mutated.
        keep_primitive_value: When True, None and UNDEFINED pass through.
        columns: Column keys the record is expected to carry. A key missing
            from the record counts as undefined.
    """
    normalized = {k: normalize_value(v, keep_primitive_value) for k, v in record.items()}

    if columns is not None and not keep_primitive_value:
        for key in columns:
            if key not in normalized:
                normalized[key] = UNDEFINED_TEXT

    return normalized


def normalize_records(
    records: Iterable[Dict[str, Any]],
    keep_primitive_value: bool = False,
    columns: Optional[Iterable[str]] = None,
) -> List[Dict[str, Any]]:
    column_keys = list(columns) if columns is not None else None
    return [normalize_record(r, keep_primitive_value, column_keys) for r in records]
