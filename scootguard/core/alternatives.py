"""
Alternative parking site generation for ScootGuard.

This module performs an exhaustive grid search around a destination and
ranks candidate parking sites by nearby theft density and distance.

Known approximations:
- The search window and grid pitch are expressed in coordinate degrees,
  not true distance. One degree of longitude shrinks with latitude, so the
  window is narrower east-west away from the equator.
- Cost is O(grid points x reports). The defaults produce a 301 x 301
  lattice (~90k points), fine for interactive use with a campus-sized
  report set. Large report volumes would need a spatial index over reports.
"""

import threading
from typing import Iterable, List, Optional, Tuple
from pydantic import BaseModel, Field

from scootguard.common.geo import haversine_distance, compass_direction
from scootguard.observability.logging_setup import get_logger
from .errors import SearchCancelled
from .models import CandidateSite, TheftReport
from .proximity import count_within_radius

log = get_logger("scootguard.alternatives")

# 안전 점수 = max(0, 기준 - 패널티 * 주변 도난 건수)
SCORE_BASE = 10
SCORE_PENALTY_PER_THEFT = 3

class AlternativeSearchConfig(BaseModel):
    """격자 탐색 파라미터"""
    search_radius_deg: float = Field(default=0.3, gt=0)
    grid_step_deg: float = Field(default=0.002, gt=0)
    min_separation_km: float = Field(default=0.1, ge=0)
    theft_radius_km: float = Field(default=0.2, ge=0)
    max_nearby_thefts_allowed: int = Field(default=1, ge=0)
    top_n: int = Field(default=5, ge=0)

def safety_score(nearby_theft_count: int) -> int:
    """주변 도난 건수로 0~10 안전 점수를 계산합니다."""
    return max(0, SCORE_BASE - nearby_theft_count * SCORE_PENALTY_PER_THEFT)

def _display_name(destination: Tuple[float, float], site: Tuple[float, float],
                  distance_km: float, destination_name: str) -> str:
    direction = compass_direction(destination[0], destination[1], site[0], site[1])
    return f"{distance_km:.2f} km {direction} of {destination_name or 'destination'}"

def generate_alternatives(destination: Tuple[float, float],
                          reports: Iterable[TheftReport],
                          config: Optional[AlternativeSearchConfig] = None,
                          *,
                          destination_name: str = "",
                          cancel_event: Optional[threading.Event] = None) -> List[CandidateSite]:
    """
    목적지 주변 격자를 탐색하여 안전한 대체 주차 후보지를 반환합니다.

    Args:
        destination: 목적지 좌표 (위도, 경도)
        reports: 전체 도난 신고 목록
        config: 격자 탐색 파라미터
        destination_name: 후보지 표시 이름에 쓰일 목적지 이름
        cancel_event: 설정되면 다음 격자 행에서 탐색을 중단

    Returns:
        안전 점수 내림차순, 거리 오름차순으로 정렬된 최대 top_n개의 후보지

    Raises:
        SearchCancelled: cancel_event가 설정된 경우
    """
    cfg = config or AlternativeSearchConfig()
    dest_lat, dest_lon = destination

    # 유효 좌표 신고만 한 번 걸러 둠
    valid_reports = [r for r in reports if r.has_valid_coordinates]

    steps = int(round(cfg.search_radius_deg / cfg.grid_step_deg))
    survivors: List[Tuple[int, float, float, float, int]] = []

    for i in range(-steps, steps + 1):
        if cancel_event is not None and cancel_event.is_set():
            log.info(f"격자 탐색 취소됨 row:{i + steps}/{2 * steps + 1}")
            raise SearchCancelled("alternative site search cancelled")

        lat = dest_lat + i * cfg.grid_step_deg
        for j in range(-steps, steps + 1):
            lon = dest_lon + j * cfg.grid_step_deg

            distance = haversine_distance(dest_lat, dest_lon, lat, lon)
            if distance < cfg.min_separation_km:
                continue

            nearby = count_within_radius(valid_reports, (lat, lon), cfg.theft_radius_km)
            if nearby > cfg.max_nearby_thefts_allowed:
                continue

            survivors.append((safety_score(nearby), distance, lat, lon, nearby))

    survivors.sort(key=lambda s: (-s[0], s[1]))
    top = survivors[:cfg.top_n]

    log.debug(f"격자 탐색 완료 grid:{(2 * steps + 1) ** 2} survivors:{len(survivors)} "
              f"reports:{len(valid_reports)}")

    return [
        CandidateSite(
            latitude=lat,
            longitude=lon,
            nearby_theft_count=nearby,
            distance_from_destination_km=distance,
            safety_score=score,
            display_name=_display_name(destination, (lat, lon), distance, destination_name),
        )
        for score, distance, lat, lon, nearby in top
    ]
