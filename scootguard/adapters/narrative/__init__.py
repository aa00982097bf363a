"""
Narrative generator adapters for ScootGuard.
"""

from .client import ChatNarrativeGenerator

__all__ = ["ChatNarrativeGenerator"]
