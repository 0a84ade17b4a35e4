"""
Utilities for turning tabular inputs into record lists.
"""
from typing import List, Dict, Any

import pyarrow as pa


def ensure_records(data: Any) -> List[Dict[str, Any]]:
    """
    Ensure the input data is a list of records.

    Args:
        data: Input data (pa.Table, pa.RecordBatch, pandas.DataFrame,
            list of dicts, or dict of column lists)

    Returns:
        List of dicts in row order
    """
    if data is None:
        return []

    if isinstance(data, (pa.Table, pa.RecordBatch)):
        return data.to_pylist()

    # Check for pandas DataFrame without importing pandas
    if hasattr(data, "to_dict") and hasattr(data, "columns"):
        return pa.Table.from_pandas(data, preserve_index=False).to_pylist()

    if isinstance(data, list):
        for row in data:
            if not isinstance(row, dict):
                raise ValueError(f"Expected a list of dicts, found {type(row).__name__}")
        return list(data)

    if isinstance(data, dict):
        return pa.Table.from_pydict(data).to_pylist()

    raise ValueError(f"Could not convert {type(data)} to records")


def column_names(data: Any) -> List[str]:
    """Column names of an Arrow table or the union of keys across records"""
    if isinstance(data, (pa.Table, pa.RecordBatch)):
        return list(data.schema.names)

    names: List[str] = []
    seen = set()
    for record in ensure_records(data):
        for key in record:
            if key not in seen:
                seen.add(key)
                names.append(key)
    return names
