"""
Metrics definitions for ScootGuard.

This module defines Prometheus metrics for monitoring
the route-safety analysis pipeline.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
route_analyses = Counter(
    "route_analyses_total",
    "Number of completed route safety analyses",
    ["safety_level"]
)

route_validation_errors = Counter(
    "route_validation_errors_total",
    "Number of route analysis requests rejected by validation",
    ["field"]
)

narrative_failures = Counter(
    "narrative_failures_total",
    "Narrative generator failures recovered with fallback text",
    ["reason"]
)

malformed_reports = Counter(
    "malformed_reports_total",
    "Theft reports skipped because of invalid coordinates"
)

reports_seeded = Counter(
    "reports_seeded_total",
    "Theft reports inserted by startup seeding",
    ["source"]
)

# 히스토그램 메트릭
grid_search_seconds = Histogram(
    "grid_search_duration_seconds",
    "Time spent in the alternative site grid search",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

narrative_seconds = Histogram(
    "narrative_duration_seconds",
    "Time spent waiting for the narrative generator",
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0]
)

end_to_end_seconds = Histogram(
    "route_analysis_duration_seconds",
    "Total route analysis latency",
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0]
)

# 게이지 메트릭
stored_reports = Gauge(
    "stored_reports",
    "Number of theft reports in the report store"
)
