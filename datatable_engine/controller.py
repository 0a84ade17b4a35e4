"""
DataTableController - one table instance and its derived row model.
"""
from typing import Optional, Any, Dict, List, Callable, Tuple
import logging

from .config import DataTableConfig, get_config
from .errors import ConfigurationError
from .grouping import RowGroupAnalyzer
from .hover import HoverHighlightCoordinator
from .normalizer import normalize_records
from .tree import NodeStore, TreeBuilder, ExpansionState
from .types.rows import HighlightSignal, HoverEvent, HoverTarget, RowGroupMeta, VisibleRow
from .types.table_spec import ColumnDescriptor, TableOptions, columns_from_list
from .util.arrow_utils import column_names, ensure_records
from .viewport import materialize, materialize_records

logger = logging.getLogger(__name__)


class DataTableController:
    """
    Coordinates: ValueNormalizer -> (TreeBuilder -> ExpansionState -> viewport)
    or (RowGroupAnalyzer) -> table rows, with hover handling on top.

    Every input change recomputes the row model before returning.
    """

    def __init__(
        self,
        columns: Optional[List[Any]] = None,
        data: Any = None,
        options: Optional[TableOptions] = None,
        config: Optional[DataTableConfig] = None,
        on_cell_hover: Optional[Callable[[HoverEvent], None]] = None,
        on_highlight: Optional[Callable[[List[HighlightSignal]], None]] = None,
    ):
        self.config = config or get_config()
        self.columns: List[ColumnDescriptor] = columns_from_list(columns)
        self.options = options or TableOptions(keep_primitive_value=self.config.keep_primitive_value)
        self.tree_builder = TreeBuilder(max_depth=self.config.max_tree_depth)
        self.expansion_state = ExpansionState(expand_all=self.options.editable_cell)
        self.hover = HoverHighlightCoordinator(
            on_cell_hover=on_cell_hover,
            on_highlight=on_highlight,
            highlight_color=self.config.highlight_color,
        )

        self.node_store: Optional[NodeStore] = None
        self.processed_data: List[Dict[str, Any]] = []
        self.group_meta: Optional[List[RowGroupMeta]] = None
        self.configuration_error: Optional[ConfigurationError] = None
        self.table_rows: List[VisibleRow] = []
        self._data_column_keys: List[str] = []

        self._raw_data = data
        self._process_data()
        self._refresh()

    @property
    def effective_columns(self) -> List[ColumnDescriptor]:
        """Configured columns, or one plain column per data key when none are set"""
        if self.columns:
            return self.columns
        return [ColumnDescriptor(key=key) for key in self._data_column_keys]

    @property
    def column_keys(self) -> List[str]:
        return [col.key for col in self.effective_columns]

    @property
    def has_valid_child(self) -> bool:
        return bool(self.options.is_tree and self.node_store and self.node_store.has_valid_child)

    def set_data(self, data: Any, **option_changes: Any):
        """
        Replace the source data; tree mode rebuilds and resets expansion.

        Option changes passed alongside are applied in the same step, so a
        switch to tree mode and its nested data land together.
        """
        previous_data, previous_options = self._raw_data, self.options
        self._raw_data = data
        self.options = previous_options.replace(**option_changes)
        try:
            self._process_data()
        except Exception:
            self._raw_data, self.options = previous_data, previous_options
            raise

        if self.options.editable_cell != previous_options.editable_cell:
            self.expansion_state.set_expand_all(self.options.editable_cell)
        self._refresh()

    def set_columns(self, columns: List[Any]):
        self.columns = columns_from_list(columns)
        if not self.options.is_tree:
            self._process_data()
        self._refresh()

    def set_options(self, **changes: Any):
        """Apply prop changes, e.g. set_options(is_tree=True, editable_cell=True)"""
        previous = self.options
        self.options = previous.replace(**changes)

        if (self.options.is_tree != previous.is_tree
                or self.options.keep_primitive_value != previous.keep_primitive_value):
            try:
                self._process_data()
            except Exception:
                self.options = previous
                raise

        if self.options.editable_cell != previous.editable_cell:
            self.expansion_state.set_expand_all(self.options.editable_cell)

        self._refresh()

    def toggle_node(self, node: Any) -> Optional[bool]:
        """Toggle a node by id or by its VisibleRow. Stale ids are a no-op"""
        node_id = node.id if isinstance(node, VisibleRow) else node
        expanded = self.expansion_state.toggle_node(node_id)
        if expanded is not None:
            self.table_rows = self._materialize()
        return expanded

    def set_expand_all(self, flag: bool):
        self.expansion_state.set_expand_all(flag)
        self.table_rows = self._materialize()

    def hover_enter(self, row_index: int, column_key: str) -> Optional[HoverEvent]:
        meta = self.group_meta if self.config.enable_rowspan_hover else None
        return self.hover.hover_enter(
            HoverTarget(row_index, column_key), self.processed_data, meta, self.column_keys
        )

    def hover_leave(self, row_index: int, column_key: str) -> bool:
        return self.hover.hover_leave(HoverTarget(row_index, column_key))

    def to_dict(self) -> Dict[str, Any]:
        rows = []
        for index, row in enumerate(self.table_rows):
            row_dict = row.to_dict()
            if self.group_meta is not None:
                meta = self.group_meta[index]
                row_dict["span"] = meta.span
                row_dict["is_group_head"] = meta.is_group_head
            rows.append(row_dict)

        return {
            "rows": rows,
            "columns": [col.to_dict() for col in self.effective_columns],
            "options": self.options.to_dict(),
            "has_valid_child": self.has_valid_child,
            "expansion_state": self.expansion_state.to_dict(),
            "highlighted_cells": [list(cell) for cell in sorted(self.hover.highlighted_cells)],
            "configuration_error": str(self.configuration_error) if self.configuration_error else None,
        }

    def _process_data(self):
        store, processed, data_keys = self._build(self._raw_data)
        self.node_store = store
        self.processed_data = processed
        self._data_column_keys = data_keys
        if store is not None:
            self.expansion_state.reset(store)

    def _build(self, data: Any) -> Tuple[Optional[NodeStore], List[Dict[str, Any]], List[str]]:
        keep = self.options.keep_primitive_value
        if self.options.is_tree:
            if data is None:
                return NodeStore(), [], []
            return self.tree_builder.build(data, keep_primitive_value=keep), [], []

        records = ensure_records(data)
        data_keys = [] if self.columns else column_names(data)
        keys = [col.key for col in self.columns] or data_keys
        return None, normalize_records(records, keep, keys), data_keys

    def _refresh(self):
        # Highlighted cells may no longer exist after any prop change
        self.hover.reset()
        self.group_meta = self._analyze_groups()
        self.table_rows = self._materialize()
        logger.debug("Recomputed %d table rows", len(self.table_rows))

    def _analyze_groups(self) -> Optional[List[RowGroupMeta]]:
        self.configuration_error = None
        if self.options.is_tree or not self.options.group_column_count:
            return None

        try:
            analyzer = RowGroupAnalyzer.from_columns(self.effective_columns, self.options.group_column_count)
        except ConfigurationError as e:
            logger.warning("Falling back to ungrouped rows: %s", e)
            self.configuration_error = e
            return None

        return analyzer.analyze(self.processed_data)

    def _materialize(self) -> List[VisibleRow]:
        if self.options.is_tree:
            return materialize(self.node_store or NodeStore(), self.expansion_state)
        return materialize_records(self.processed_data)
