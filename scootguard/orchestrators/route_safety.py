"""
Route safety orchestrator for ScootGuard.

This module composes the proximity filter, safety level resolver and
alternative site generator with the narrative generator into a single
request-scoped analysis pipeline.
"""

import asyncio
import threading
import time
from typing import List, Optional, Sequence, Tuple

from scootguard.common.geo import is_finite_coordinate
from scootguard.core.alternatives import generate_alternatives
from scootguard.core.errors import GeneratorUnavailable, ValidationError
from scootguard.core.models import (
    CandidateSite, Destination, RouteAnalysis, SafetyZone, TheftReport,
)
from scootguard.core.prompt import (
    DEFAULT_FALLBACK_NARRATIVE, build_parking_prompt, build_route_prompt,
)
from scootguard.core.proximity import within_radius
from scootguard.core.safety_level import resolve_safety_level
from scootguard.core.severity import classify
from scootguard.core.zones import SAFETY_ZONES, find_nearest_zone
from scootguard.observability import metrics
from scootguard.observability.logging_setup import get_logger
from scootguard.ports.narrative import NarrativeGeneratorPort
from scootguard.ports.reports import ReportStorePort
from scootguard.settings import RouteSearch

log = get_logger("scootguard.route")

Point = Tuple[Optional[float], Optional[float]]

def validate_point(point: Point, lat_field: str, lon_field: str) -> Tuple[float, float]:
    """
    좌표를 검증하고 (위도, 경도)를 반환합니다.

    Raises:
        ValidationError: 좌표 누락 또는 비유한 값 (필드명 포함)
    """
    lat, lon = point
    if not is_finite_coordinate(lat, 0.0):
        raise ValidationError(lat_field)
    if not is_finite_coordinate(0.0, lon):
        raise ValidationError(lon_field)
    return float(lat), float(lon)

class RouteSafetyOrchestrator:
    """경로 안전 분석 오케스트레이터"""

    def __init__(self,
                 store: ReportStorePort,
                 generator: Optional[NarrativeGeneratorPort] = None,
                 *,
                 search: Optional[RouteSearch] = None,
                 narrative_timeout_sec: float = 10.0,
                 fallback_narrative: str = DEFAULT_FALLBACK_NARRATIVE,
                 description_max_chars: int = 100,
                 zones: Sequence[SafetyZone] = SAFETY_ZONES):
        """
        초기화합니다.

        Args:
            store: 도난 신고 저장소 포트
            generator: 서술 생성기 포트 (None이면 항상 대체 문구 사용)
            search: 격자 탐색 및 반경 설정
            narrative_timeout_sec: 서술 생성 타임아웃 (초)
            fallback_narrative: 서술 생성 실패 시 대체 문구
            description_max_chars: 프롬프트에 넣을 신고 설명 최대 길이
            zones: 안전 구역 참조 데이터
        """
        self.store = store
        self.generator = generator
        self.search = search or RouteSearch()
        self.narrative_timeout = narrative_timeout_sec
        self.fallback_narrative = fallback_narrative
        self.description_max_chars = description_max_chars
        self.zones = list(zones)

    async def analyze_route(self,
                            origin: Point,
                            destination: Destination,
                            all_reports: Optional[Sequence[TheftReport]] = None) -> RouteAnalysis:
        """
        목적지의 도난 위험을 분석합니다.

        Args:
            origin: 출발지 좌표 (위도, 경도)
            destination: 목적지
            all_reports: 신고 스냅샷 (None이면 저장소에서 한 번 조회)

        Returns:
            경로 안전 분석 결과

        Raises:
            ValidationError: 출발지/목적지 좌표 누락 또는 비유한 값
        """
        started = time.perf_counter()

        try:
            validate_point(origin, "startLat", "startLng")
            dest = validate_point(destination.coordinates, "endLat", "endLng")
        except ValidationError as e:
            metrics.route_validation_errors.labels(field=e.field).inc()
            raise

        if all_reports is None:
            all_reports = await self.store.fetch_all_reports()
        reports = list(all_reports)

        malformed = sum(1 for r in reports if not r.has_valid_coordinates)
        if malformed:
            metrics.malformed_reports.inc(malformed)
            log.warning(f"좌표가 유효하지 않은 신고 제외 count:{malformed}")

        matched = within_radius(reports, dest, self.search.destination_radius_km)
        level = resolve_safety_level(len(matched))

        candidates = await self._search_alternatives(dest, reports, destination.name)

        prompt = build_route_prompt(
            destination.name, matched, level, candidates,
            description_max_chars=self.description_max_chars,
        )
        narrative, available = await self._narrate(prompt)

        analysis = RouteAnalysis(
            safety_level=level,
            nearby_theft_count=len(matched),
            narrative=narrative,
            narrative_available=available,
            candidate_sites=candidates,
            matched_reports=matched,
            report_severities=[classify(r) for r in matched],
            nearest_safety_zone=find_nearest_zone(dest[0], dest[1], self.zones),
        )

        metrics.route_analyses.labels(safety_level=level.value).inc()
        metrics.end_to_end_seconds.observe(time.perf_counter() - started)
        log.info(f"경로 분석 완료 destination:{destination.name or dest} level:{level.value} "
                 f"nearby:{len(matched)} alternatives:{len(candidates)}")
        return analysis

    async def _search_alternatives(self,
                                   dest: Tuple[float, float],
                                   reports: List[TheftReport],
                                   destination_name: str) -> List[CandidateSite]:
        """격자 탐색을 워커 스레드에서 실행합니다. 취소되면 다음 행에서 중단됩니다."""
        cancel = threading.Event()
        started = time.perf_counter()
        try:
            return await asyncio.to_thread(
                generate_alternatives,
                dest,
                reports,
                self.search,
                destination_name=destination_name,
                cancel_event=cancel,
            )
        except asyncio.CancelledError:
            cancel.set()
            raise
        finally:
            metrics.grid_search_seconds.observe(time.perf_counter() - started)

    async def _narrate(self, prompt: str) -> Tuple[str, bool]:
        """서술을 생성합니다. 실패하면 대체 문구와 False를 반환합니다."""
        if self.generator is None:
            metrics.narrative_failures.labels(reason="disabled").inc()
            return self.fallback_narrative, False

        started = time.perf_counter()
        try:
            text = await asyncio.wait_for(self.generator.generate(prompt),
                                          timeout=self.narrative_timeout)
            return text, True
        except asyncio.TimeoutError:
            metrics.narrative_failures.labels(reason="timeout").inc()
            log.warning(f"서술 생성 타임아웃 timeout:{self.narrative_timeout}s")
        except GeneratorUnavailable as e:
            metrics.narrative_failures.labels(reason="unavailable").inc()
            log.warning(f"서술 생성기 사용 불가 error:{str(e)}")
        finally:
            metrics.narrative_seconds.observe(time.perf_counter() - started)

        return self.fallback_narrative, False

    async def suggest_parking(self, all_reports: Optional[Sequence[TheftReport]] = None) -> str:
        """
        도난 발생 위치 전체를 바탕으로 주차 팁을 생성합니다.

        Args:
            all_reports: 신고 스냅샷 (None이면 위치가 있는 신고를 저장소에서 조회)

        Returns:
            주차 팁 텍스트

        Raises:
            GeneratorUnavailable: 생성기가 없거나 호출 실패/타임아웃
        """
        if self.generator is None:
            raise GeneratorUnavailable("narrative generator is disabled")

        if all_reports is None:
            all_reports = await self.store.fetch_reports_with_location()

        prompt = build_parking_prompt(r.location for r in all_reports)
        try:
            return await asyncio.wait_for(self.generator.generate(prompt),
                                          timeout=self.narrative_timeout)
        except asyncio.TimeoutError as e:
            metrics.narrative_failures.labels(reason="timeout").inc()
            raise GeneratorUnavailable("parking suggestion timed out") from e
