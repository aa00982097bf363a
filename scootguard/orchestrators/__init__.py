"""
Orchestrators for ScootGuard.

This module contains the orchestrators that coordinate
the flow between ports and the core scoring engine.
"""
from .route_safety import RouteSafetyOrchestrator

__all__ = ["RouteSafetyOrchestrator"]
