"""Adapters — process execution for the package backend.

Public re-exports for convenient access.
"""

from sunpkg.adapters.base import Adapter, ExecutionContext
from sunpkg.adapters.mock import MockAdapter
from sunpkg.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
