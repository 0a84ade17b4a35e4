"""
Row model types produced by the engine for the rendering layer.
"""
from dataclasses import dataclass, field
from typing import List, Any, Optional, Tuple


@dataclass
class Node:
    id: str
    parent_id: Optional[str]
    level: int
    key: str
    value: Any = None
    has_children: bool = False
    children: List[str] = field(default_factory=list)


@dataclass
class VisibleRow:
    id: str
    expanded: bool
    level: int
    source_ref: Any
    has_children: bool = False

    def to_dict(self):
        source = self.source_ref
        if isinstance(source, Node):
            source = {
                "key": source.key,
                "value": source.value,
                "parent_id": source.parent_id,
            }
        return {
            "id": self.id,
            "expanded": self.expanded,
            "level": self.level,
            "has_children": self.has_children,
            "source": source,
        }


@dataclass
class RowGroupMeta:
    group_key: Tuple[Any, ...]
    span: int
    is_group_head: bool
    head_index: int


@dataclass(frozen=True)
class HoverTarget:
    """Identity of a hovered cell"""
    row_index: int
    column_key: str


@dataclass
class HighlightSignal:
    row_index: int
    column_key: str
    applied: bool
    color: Optional[str] = None


@dataclass
class HoverEvent:
    item: Any
    target: HoverTarget
