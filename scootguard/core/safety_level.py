"""
Safety level resolution for ScootGuard.

This module contains the pure thresholding from a nearby
theft count to a coarse safety category.
"""

from .models import SafetyLevel

# 등급 임계값 (이상)
MODERATE_RISK_MIN = 1
HIGH_RISK_MIN = 3

def resolve_safety_level(theft_count: int) -> SafetyLevel:
    """
    도난 건수로 안전 등급을 결정합니다.

    Args:
        theft_count: 목적지 주변 도난 건수 (0 이상)

    Returns:
        0 → Safe, 1~2 → Moderate Risk, 3 이상 → High Risk

    Raises:
        ValueError: 음수 입력
    """
    if theft_count < 0:
        raise ValueError(f"theft_count must be non-negative, got {theft_count}")

    if theft_count >= HIGH_RISK_MIN:
        return SafetyLevel.HIGH_RISK
    if theft_count >= MODERATE_RISK_MIN:
        return SafetyLevel.MODERATE_RISK
    return SafetyLevel.SAFE
