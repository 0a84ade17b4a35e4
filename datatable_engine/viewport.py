"""
viewport.py - Derives the rows that should currently render
"""
from typing import Any, Dict, List, Sequence

from .tree import NodeStore, ExpansionState
from .types.rows import VisibleRow


def materialize(store: NodeStore, state: ExpansionState) -> List[VisibleRow]:
    """
    Walk the tree depth first and emit every node whose ancestors are all
    expanded. Collapsed subtrees contribute zero rows.
    """
    rows: List[VisibleRow] = []
    # Children are pushed reversed so they pop in tree order
    stack = [store.get(node_id) for node_id in reversed(store.roots)]

    while stack:
        node = stack.pop()
        expanded = state.is_expanded(node.id)
        rows.append(VisibleRow(
            id=node.id,
            expanded=expanded,
            level=node.level,
            source_ref=node,
            has_children=node.has_children,
        ))
        if expanded:
            stack.extend(reversed(store.children_of(node.id)))

    return rows


def materialize_records(records: Sequence[Dict[str, Any]]) -> List[VisibleRow]:
    """Project flat records onto the uniform row model"""
    return [
        VisibleRow(id=str(index), expanded=False, level=0, source_ref=record)
        for index, record in enumerate(records)
    ]
