"""
Port interfaces for ScootGuard hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the core domain and external adapters.
"""

from .reports import ReportStorePort
from .narrative import NarrativeGeneratorPort

__all__ = ["ReportStorePort", "NarrativeGeneratorPort"]
