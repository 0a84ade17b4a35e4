"""
hover.py - Cross-row hover highlighting for grouped tables

What is highlighted (the whole group) is decoupled from what triggered it
(the single hovered row), which is what the hover event carries.
"""
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple
import logging

from .grouping import group_rows
from .types.rows import HighlightSignal, HoverEvent, HoverTarget, RowGroupMeta

logger = logging.getLogger(__name__)


class HoverHighlightCoordinator:
    """
    Tracks the hovered cell and the highlighted group.

    Last write wins: only the most recent hover_enter is authoritative, and a
    hover_leave for any other target is ignored.
    """

    def __init__(
        self,
        on_cell_hover: Optional[Callable[[HoverEvent], None]] = None,
        on_highlight: Optional[Callable[[List[HighlightSignal]], None]] = None,
        highlight_color: Optional[str] = None,
    ):
        self.on_cell_hover = on_cell_hover
        self.on_highlight = on_highlight
        self.highlight_color = highlight_color
        self.current_target: Optional[HoverTarget] = None
        self._highlighted_head: Optional[int] = None
        self._highlighted_cells: Set[Tuple[int, str]] = set()

    @property
    def highlighted_cells(self) -> Set[Tuple[int, str]]:
        return set(self._highlighted_cells)

    def hover_enter(
        self,
        target: HoverTarget,
        records: Sequence[Dict[str, Any]],
        group_meta: Optional[Sequence[RowGroupMeta]],
        column_keys: Sequence[str],
    ) -> Optional[HoverEvent]:
        """
        Handle a cell mouseenter.

        Args:
            target: The hovered cell.
            records: Records in current row order.
            group_meta: Per-row group metadata, or None when grouping is off.
            column_keys: Keys of every configured column.

        Returns:
            The emitted HoverEvent, or None when the target was already current.
        """
        if target == self.current_target:
            return None
        if not 0 <= target.row_index < len(records):
            logger.debug("Ignoring hover on out-of-range row %d", target.row_index)
            return None

        self.current_target = target

        if group_meta:
            head = group_meta[target.row_index].head_index
            if head != self._highlighted_head:
                self._clear()
                rows = group_rows(group_meta, target.row_index)
                self._apply(head, rows, column_keys)
        else:
            self._clear()

        event = HoverEvent(item=records[target.row_index], target=target)
        if self.on_cell_hover:
            self.on_cell_hover(event)
        return event

    def hover_leave(self, target: HoverTarget) -> bool:
        """Handle a cell mouseleave. Returns True if the highlight was cleared"""
        if target != self.current_target:
            logger.debug("Ignoring stale hover leave for %s", target)
            return False
        self.current_target = None
        self._clear()
        return True

    def reset(self):
        self.current_target = None
        self._clear()

    def _apply(self, head: int, rows: List[int], column_keys: Sequence[str]):
        self._highlighted_head = head
        signals = []
        for row_index in rows:
            for key in column_keys:
                self._highlighted_cells.add((row_index, key))
                signals.append(HighlightSignal(row_index, key, True, self.highlight_color))
        self._emit(signals)

    def _clear(self):
        if not self._highlighted_cells:
            self._highlighted_head = None
            return
        signals = [
            HighlightSignal(row_index, key, False)
            for row_index, key in sorted(self._highlighted_cells)
        ]
        self._highlighted_cells.clear()
        self._highlighted_head = None
        self._emit(signals)

    def _emit(self, signals: List[HighlightSignal]):
        if signals and self.on_highlight:
            self.on_highlight(signals)
