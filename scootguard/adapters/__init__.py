"""
Adapters for ScootGuard hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .storage import SQLiteReportStore
from .narrative import ChatNarrativeGenerator

__all__ = ["SQLiteReportStore", "ChatNarrativeGenerator"]
