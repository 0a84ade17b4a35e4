"""
grouping.py - Contiguous row grouping with rowspan metadata

Grouping is run-length based over the current row order: two non-adjacent
records with equal keys form two distinct groups.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from .errors import ConfigurationError
from .normalizer import UNDEFINED
from .types.rows import RowGroupMeta
from .types.table_spec import ColumnDescriptor

logger = logging.getLogger(__name__)


class RowGroupAnalyzer:
    """Computes group heads and spans over one or more leading key columns"""

    def __init__(
        self,
        group_keys: Optional[Sequence[str]] = None,
        column_keys: Optional[Sequence[str]] = None,
    ):
        self.group_keys: List[str] = list(group_keys or [])
        if column_keys is not None:
            missing = [k for k in self.group_keys if k not in column_keys]
            if missing:
                raise ConfigurationError(f"Grouping keys not in columns: {missing}", missing)

    @classmethod
    def from_columns(
        cls, columns: Sequence[ColumnDescriptor], group_column_count: int
    ) -> "RowGroupAnalyzer":
        """Use the first group_column_count columns as grouping keys"""
        if (isinstance(group_column_count, bool)
                or not isinstance(group_column_count, int) or group_column_count < 0):
            raise ConfigurationError(
                f"group_column_count must be a non-negative integer, got {group_column_count!r}",
                group_column_count,
            )
        if group_column_count > len(columns):
            raise ConfigurationError(
                f"group_column_count {group_column_count} exceeds the {len(columns)} configured columns",
                group_column_count,
            )
        keys = [col.key for col in columns]
        return cls(keys[:group_column_count], column_keys=keys)

    @property
    def enabled(self) -> bool:
        return bool(self.group_keys)

    def group_key(self, record: Dict[str, Any]) -> Tuple[Any, ...]:
        return tuple(record.get(key, UNDEFINED) for key in self.group_keys)

    def analyze(self, records: Sequence[Dict[str, Any]]) -> List[RowGroupMeta]:
        meta: List[RowGroupMeta] = []

        if not self.enabled:
            for index, record in enumerate(records):
                meta.append(RowGroupMeta(group_key=(), span=1, is_group_head=True, head_index=index))
            return meta

        head: Optional[RowGroupMeta] = None
        for index, record in enumerate(records):
            key = self.group_key(record)
            if head is not None and key == head.group_key:
                head.span += 1
                meta.append(RowGroupMeta(group_key=key, span=0, is_group_head=False, head_index=head.head_index))
            else:
                head = RowGroupMeta(group_key=key, span=1, is_group_head=True, head_index=index)
                meta.append(head)

        logger.debug(
            "Grouped %d rows into %d groups on %s",
            len(records), sum(1 for m in meta if m.is_group_head), self.group_keys
        )
        return meta


def group_rows(meta: Sequence[RowGroupMeta], row_index: int) -> List[int]:
    """Row indexes belonging to the group that contains row_index"""
    head = meta[meta[row_index].head_index]
    return list(range(head.head_index, head.head_index + head.span))
