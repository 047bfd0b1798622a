"""
Pizzeria store capability and its in-memory implementation
"""

from .memory import MemoryStore
from .store import CreateError, InvalidContinuationToken, ListResult, ReplaceError, ResourceStore
