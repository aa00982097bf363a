"""
Observability for ScootGuard: logging, metrics and HTTP endpoints.
"""
