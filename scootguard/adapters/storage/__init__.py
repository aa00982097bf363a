"""
Storage adapters for ScootGuard hexagonal architecture.

This module contains storage adapters for theft report persistence.
"""

from .sqlite_reports import SQLiteReportStore

__all__ = ["SQLiteReportStore"]
