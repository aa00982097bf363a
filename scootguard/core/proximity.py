"""
Proximity filter for geolocated theft reports.
"""

from typing import Iterable, List, Tuple
from scootguard.common.geo import haversine_distance
from .models import TheftReport

def within_radius(reports: Iterable[TheftReport],
                  center: Tuple[float, float],
                  radius_km: float) -> List[TheftReport]:
    """
    중심점에서 반경 이내의 신고만 입력 순서대로 반환합니다.

    좌표가 유효하지 않은 신고는 예외 없이 건너뜁니다.

    Args:
        reports: 도난 신고 목록
        center: 중심 좌표 (위도, 경도)
        radius_km: 반경 (킬로미터, 경계 포함)

    Returns:
        반경 이내 신고 목록
    """
    lat, lon = center
    matched = []
    for r in reports:
        if not r.has_valid_coordinates:
            continue
        if haversine_distance(lat, lon, r.latitude, r.longitude) <= radius_km:
            matched.append(r)
    return matched

def count_within_radius(reports: Iterable[TheftReport],
                        center: Tuple[float, float],
                        radius_km: float) -> int:
    """반경 이내 신고 수를 반환합니다."""
    return len(within_radius(reports, center, radius_km))
