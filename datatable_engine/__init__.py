"""
datatable_engine package - row model for flat, tree and grouped tables

Expose the table controller and the pipeline stages it composes.
"""
from .controller import DataTableController
from .errors import DataTableError, StructuralError, ConfigurationError
from .grouping import RowGroupAnalyzer
from .hover import HoverHighlightCoordinator
from .normalizer import UNDEFINED, normalize_record
from .tree import TreeBuilder, ExpansionState, NodeStore
from .viewport import materialize

__all__ = [
    "DataTableController",
    "DataTableError",
    "StructuralError",
    "ConfigurationError",
    "RowGroupAnalyzer",
    "HoverHighlightCoordinator",
    "UNDEFINED",
    "normalize_record",
    "TreeBuilder",
    "ExpansionState",
    "NodeStore",
    "materialize",
]
