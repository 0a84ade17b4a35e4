"""
errors.py - Error types raised by the data table engine
"""
from typing import Any, Optional


class DataTableError(ValueError):
    """Base class for data table errors"""

    def __init__(self, message: str, offending_input: Optional[Any] = None):
        super().__init__(message)
        self.offending_input = offending_input


class StructuralError(DataTableError):
    """Nested input cannot be flattened into a tree (cycle, depth, shape)"""


class ConfigurationError(DataTableError):
    """Grouping configuration references columns that do not exist"""
