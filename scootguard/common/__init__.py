"""
Common utilities for ScootGuard.
"""
