"""
Core domain models and pure functions for ScootGuard.

This module contains the domain models and the route-safety scoring logic
that are independent of external I/O and infrastructure concerns.
"""

from .models import (
    TheftReport, SafetyZone, Destination, CandidateSite, RouteAnalysis,
    SafetyLevel, Severity, ZoneProximity,
)
from .errors import ValidationError, GeneratorUnavailable, SearchCancelled
from .severity import classify
from .proximity import within_radius
from .safety_level import resolve_safety_level
from .alternatives import generate_alternatives, AlternativeSearchConfig

__all__ = [
    "TheftReport", "SafetyZone", "Destination", "CandidateSite", "RouteAnalysis",
    "SafetyLevel", "Severity", "ZoneProximity",
    "ValidationError", "GeneratorUnavailable", "SearchCancelled",
    "classify", "within_radius", "resolve_safety_level",
    "generate_alternatives", "AlternativeSearchConfig",
]
