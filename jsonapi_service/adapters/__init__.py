"""Storage adapters."""

from .base import OPERATIONS, BaseAdapter, resource_override
from .memory import MemoryAdapter

__all__ = ["OPERATIONS", "BaseAdapter", "MemoryAdapter", "resource_override"]
