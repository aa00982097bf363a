"""
Geographic utilities for ScootGuard.

This module provides geographic calculations including
great-circle distance, coordinate validation and compass bearings.
"""

import math
from typing import Optional

# 지구 반지름 (킬로미터)
EARTH_RADIUS_KM = 6371.0

COMPASS_POINTS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]

def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다 (킬로미터).

    NaN/무한대 입력은 NaN으로 전파됩니다. 호출자가 사전에 걸러야 합니다.

    Args:
        lat1: 첫 번째 지점의 위도
        lon1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lon2: 두 번째 지점의 경도

    Returns:
        두 지점 간의 거리 (킬로미터)
    """
    # 도를 라디안으로 변환
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)

    # 위도와 경도의 차이
    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    # Haversine 공식
    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    # 대척점 근처의 반올림 오차로 a가 1을 넘지 않도록 제한
    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return c * EARTH_RADIUS_KM

def validate_coordinates(lat: float, lon: float) -> bool:
    """
    좌표가 유효한 범위인지 확인합니다.

    Args:
        lat: 위도
        lon: 경도

    Returns:
        좌표가 유효하면 True
    """
    return -90 <= lat <= 90 and -180 <= lon <= 180

def is_finite_coordinate(lat: Optional[float], lon: Optional[float]) -> bool:
    """좌표가 존재하고 유한한 숫자이며 범위 안에 있는지 확인합니다."""
    if lat is None or lon is None:
        return False
    if isinstance(lat, bool) or isinstance(lon, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return validate_coordinates(lat, lon)

def compass_direction(lat1: float, lon1: float, lat2: float, lon2: float) -> str:
    """
    첫 번째 지점에서 두 번째 지점으로의 8방위를 반환합니다.

    Args:
        lat1: 기준 지점 위도
        lon1: 기준 지점 경도
        lat2: 대상 지점 위도
        lon2: 대상 지점 경도

    Returns:
        "N", "NE", ... 중 하나
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    x = math.sin(dlon) * math.cos(lat2_rad)
    y = (math.cos(lat1_rad) * math.sin(lat2_rad) -
         math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(dlon))
    bearing = (math.degrees(math.atan2(x, y)) + 360) % 360

    return COMPASS_POINTS[int((bearing + 22.5) // 45) % 8]
