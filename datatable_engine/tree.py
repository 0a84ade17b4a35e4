"""
Tree Flattening and Expansion State for Nested Data Tables

Converts nested key/value objects into a flat, id-indexed node store and
tracks which nodes are expanded.
"""

from typing import Dict, Any, List, Optional, Set, Iterator
from dataclasses import dataclass, field
import logging
import time

from .errors import StructuralError
from .normalizer import normalize_value
from .types.rows import Node

logger = logging.getLogger(__name__)


class NodeStore:
    """Arena of nodes keyed by id, with parent/child links as id references"""

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self.roots: List[str] = []

    def add(self, node: Node):
        if node.id in self._nodes:
            raise StructuralError(f"Duplicate node id: {node.id}", node.id)
        self._nodes[node.id] = node
        if node.parent_id is None:
            self.roots.append(node.id)
        else:
            self._nodes[node.parent_id].children.append(node.id)

    def get(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def children_of(self, node_id: str) -> List[Node]:
        node = self._nodes.get(node_id)
        if node is None:
            return []
        return [self._nodes[child_id] for child_id in node.children]

    def expandable_ids(self) -> Set[str]:
        return {node_id for node_id, node in self._nodes.items() if node.has_children}

    @property
    def has_valid_child(self) -> bool:
        """True when at least one node can be expanded"""
        return any(node.has_children for node in self._nodes.values())

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        # Nodes are added depth first, so insertion order is tree order
        return iter(self._nodes.values())


class TreeBuilder:
    """
    Flattens a nested mapping into a NodeStore.

    Keys are visited in insertion order, depth first. A node id is its key;
    on collision it becomes "<parent id>.<key>", then gets a "#n" suffix.
    """

    def __init__(self, max_depth: int = 64):
        self.max_depth = max_depth

    def build(self, obj: Any, keep_primitive_value: bool = False) -> NodeStore:
        if not isinstance(obj, dict):
            raise StructuralError(
                f"Tree input must be a mapping, got {type(obj).__name__}", obj
            )

        store = NodeStore()
        # Each frame: (remaining items, parent id, level, id of the container)
        stack = [(iter(self._items(obj)), None, 0, id(obj))]
        on_path: Set[int] = {id(obj)}

        while stack:
            items, parent_id, level, container_id = stack[-1]
            item = next(items, None)
            if item is None:
                stack.pop()
                on_path.discard(container_id)
                continue

            key, value = item
            node_id = self._unique_id(store, key, parent_id)

            if not self._is_container(value):
                store.add(Node(
                    id=node_id,
                    parent_id=parent_id,
                    level=level,
                    key=key,
                    value=normalize_value(value, keep_primitive_value),
                ))
                continue

            if id(value) in on_path:
                raise StructuralError(
                    f"Cyclic reference at key '{key}' under '{parent_id}'", key
                )
            store.add(Node(
                id=node_id,
                parent_id=parent_id,
                level=level,
                key=key,
                value=None,
                has_children=len(value) > 0,
            ))
            if len(value) == 0:
                continue
            if level + 1 >= self.max_depth:
                raise StructuralError(
                    f"Tree input exceeds maximum depth of {self.max_depth}", node_id
                )
            stack.append((iter(self._items(value)), node_id, level + 1, id(value)))
            on_path.add(id(value))

        logger.debug("Built tree with %d nodes", len(store))
        return store

    def _items(self, container: Any):
        if isinstance(container, dict):
            return [(str(k), v) for k, v in container.items()]
        return [(str(i), v) for i, v in enumerate(container)]

    def _is_container(self, value: Any) -> bool:
        return isinstance(value, (dict, list, tuple))

    def _unique_id(self, store: NodeStore, key: str, parent_id: Optional[str]) -> str:
        if key not in store:
            return key
        candidate = f"{parent_id}.{key}" if parent_id is not None else key
        base = candidate
        suffix = 1
        while candidate in store:
            candidate = f"{base}#{suffix}"
            suffix += 1
        return candidate


@dataclass
class ExpansionState:
    """
    Expansion state for one tree instance.

    Two layers composed at read time: per-node intent set by toggle_node, and
    an expand-all override that never rewrites the per-node intent. Nodes
    toggled while the override is on collapse against it until the override
    changes.
    """
    expanded_nodes: Dict[str, bool] = field(default_factory=dict)
    expand_all: bool = False
    override_collapsed: Set[str] = field(default_factory=set)
    expandable: Set[str] = field(default_factory=set)
    known_ids: Set[str] = field(default_factory=set)
    timestamp: float = field(default_factory=time.time)

    def reset(self, store: NodeStore):
        """Bind to a rebuilt tree; prior per-node flags are dropped"""
        self.expanded_nodes = {}
        self.override_collapsed = set()
        self.expandable = store.expandable_ids()
        self.known_ids = {node.id for node in store}
        self.timestamp = time.time()

    def is_expanded(self, node_id: str) -> bool:
        if self.expand_all and node_id in self.expandable:
            return node_id not in self.override_collapsed
        return self.expanded_nodes.get(node_id, False)

    def toggle_node(self, node_id: str) -> Optional[bool]:
        """Flip one node. Returns the new effective flag, None for unknown ids"""
        if node_id not in self.known_ids:
            logger.debug("Ignoring toggle for unknown node %r", node_id)
            return None

        if self.expand_all and node_id in self.expandable:
            if node_id in self.override_collapsed:
                self.override_collapsed.discard(node_id)
            else:
                self.override_collapsed.add(node_id)
        else:
            self.expanded_nodes[node_id] = not self.expanded_nodes.get(node_id, False)
        self.timestamp = time.time()
        return self.is_expanded(node_id)

    def set_expand_all(self, flag: bool):
        if bool(flag) != self.expand_all:
            self.override_collapsed = set()
        self.expand_all = bool(flag)
        self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expanded_nodes": sorted(k for k, v in self.expanded_nodes.items() if v),
            "expand_all": self.expand_all,
            "override_collapsed": sorted(self.override_collapsed),
            "timestamp": self.timestamp,
        }
