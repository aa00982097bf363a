"""
Route Safety Orchestrator 단위 테스트

이 모듈은 경로 안전 분석 오케스트레이터의 기능을 테스트합니다.
"""

import json
import pytest
import asyncio
import threading
from unittest.mock import AsyncMock, MagicMock, Mock, patch
from scootguard.adapters.narrative.client import ChatNarrativeGenerator
from scootguard.core.errors import GeneratorUnavailable, ValidationError
from scootguard.core.models import Destination, SafetyLevel, Severity
from scootguard.core.prompt import DEFAULT_FALLBACK_NARRATIVE
from scootguard.orchestrators.route_safety import RouteSafetyOrchestrator, validate_point
from scootguard.settings import RouteSearch

USC = (34.0224, -118.2851)
ORIGIN = (34.0256, -118.2775)


@pytest.fixture
def orchestrator(mock_store, mock_generator, small_search):
    """테스트용 오케스트레이터"""
    return RouteSafetyOrchestrator(mock_store, mock_generator, search=small_search,
                                   narrative_timeout_sec=1.0)


class TestValidation:
    """좌표 검증 테스트"""

    def test_validate_point_ok(self):
        assert validate_point((34.0, -118.0), "endLat", "endLng") == (34.0, -118.0)

    @pytest.mark.parametrize("point,field", [
        ((None, -118.0), "endLat"),
        ((34.0, None), "endLng"),
        ((float("nan"), -118.0), "endLat"),
        ((34.0, float("inf")), "endLng"),
    ])
    def test_validate_point_names_field(self, point, field):
        with pytest.raises(ValidationError) as exc:
            validate_point(point, "endLat", "endLng")
        assert exc.value.field == field
        assert field in str(exc.value)

    @pytest.mark.asyncio
    async def test_missing_destination_rejected(self, orchestrator, mock_store):
        """목적지 좌표 누락 시 ValidationError"""
        with pytest.raises(ValidationError) as exc:
            await orchestrator.analyze_route(ORIGIN, Destination(latitude=34.0, name="x"))

        assert exc.value.field == "endLng"
        mock_store.fetch_all_reports.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_origin_rejected(self, orchestrator, usc_destination):
        """출발지 좌표 누락 시 ValidationError"""
        with pytest.raises(ValidationError) as exc:
            await orchestrator.analyze_route((None, None), usc_destination)

        assert exc.value.field == "startLat"


class TestAnalyzeRoute:
    """경로 분석 테스트"""

    @pytest.mark.asyncio
    async def test_high_risk_end_to_end_integration(self, mock_store, mock_generator, make_report,
                                                    usc_destination):
        """목적지 근처 도난 3건이면 High Risk와 안전 점수 10 후보지 반환"""
        reports = [make_report(f"r{i}", USC[0], USC[1]) for i in range(3)]
        orch = RouteSafetyOrchestrator(mock_store, mock_generator, search=RouteSearch())

        analysis = await orch.analyze_route(ORIGIN, usc_destination, reports)

        assert analysis.safety_level == SafetyLevel.HIGH_RISK
        assert analysis.nearby_theft_count == 3
        assert 0 < len(analysis.candidate_sites) <= 5
        assert all(c.safety_score == 10 for c in analysis.candidate_sites)
        assert analysis.narrative == mock_generator.generate.return_value
        assert analysis.narrative_available is True
        wire = analysis.to_wire()
        assert wire["safetyLevel"] == "High Risk"
        assert wire["nearbyThefts"] == 3

    @pytest.mark.asyncio
    async def test_fetches_snapshot_from_store(self, orchestrator, mock_store, usc_reports,
                                               usc_destination):
        """신고 미지정 시 저장소에서 한 번 조회"""
        mock_store.fetch_all_reports.return_value = usc_reports

        analysis = await orchestrator.analyze_route(ORIGIN, usc_destination)

        mock_store.fetch_all_reports.assert_awaited_once()
        assert [r.id for r in analysis.matched_reports] == ["taper", "village"]
        assert analysis.safety_level == SafetyLevel.MODERATE_RISK
        assert analysis.report_severities == [Severity.COMPLETED, Severity.ATTEMPTED_OR_UNRESOLVED]

    @pytest.mark.asyncio
    async def test_safe_destination(self, orchestrator, usc_destination):
        """주변 신고가 없으면 Safe"""
        analysis = await orchestrator.analyze_route(ORIGIN, usc_destination, [])

        assert analysis.safety_level == SafetyLevel.SAFE
        assert analysis.nearby_theft_count == 0
        assert len(analysis.candidate_sites) == 5
        assert analysis.nearest_safety_zone.zone.id == "usc-security"

    @pytest.mark.asyncio
    async def test_malformed_report_excluded(self, orchestrator, make_report, usc_destination):
        """NaN 좌표 신고는 집계에서 제외"""
        reports = [
            make_report("nan", float("nan"), USC[1]),
            make_report("none", None, None),
            make_report("ok", USC[0], USC[1]),
        ]

        analysis = await orchestrator.analyze_route(ORIGIN, usc_destination, reports)

        assert analysis.nearby_theft_count == 1
        assert [r.id for r in analysis.matched_reports] == ["ok"]
        assert analysis.safety_level == SafetyLevel.MODERATE_RISK

    @pytest.mark.asyncio
    async def test_prompt_passed_to_generator(self, orchestrator, mock_generator, usc_reports,
                                              usc_destination):
        """프롬프트에 목적지 이름과 건수 포함"""
        await orchestrator.analyze_route(ORIGIN, usc_destination, usc_reports)

        prompt = mock_generator.generate.await_args.args[0]
        assert "Leavey Library" in prompt
        assert "2 scooter theft reports" in prompt


class TestNarrativeFallback:
    """서술 생성 실패 처리 테스트"""

    @pytest.mark.asyncio
    async def test_generator_unavailable_uses_fallback(self, orchestrator, mock_generator,
                                                       usc_reports, usc_destination):
        """생성기 오류 시 대체 문구와 전체 분석 반환"""
        mock_generator.generate.side_effect = GeneratorUnavailable("down")

        analysis = await orchestrator.analyze_route(ORIGIN, usc_destination, usc_reports)

        assert analysis.narrative == DEFAULT_FALLBACK_NARRATIVE
        assert analysis.narrative_available is False
        assert analysis.nearby_theft_count == 2
        assert len(analysis.candidate_sites) == 5

    @pytest.mark.asyncio
    async def test_generator_timeout_uses_fallback(self, mock_store, small_search, usc_destination):
        """생성기 타임아웃 시 대체 문구 반환"""
        async def slow_generate(prompt):
            await asyncio.sleep(5)
            return "too late"

        generator = AsyncMock()
        generator.generate.side_effect = slow_generate
        orch = RouteSafetyOrchestrator(mock_store, generator, search=small_search,
                                       narrative_timeout_sec=0.05,
                                       fallback_narrative="fallback")

        analysis = await orch.analyze_route(ORIGIN, usc_destination, [])

        assert analysis.narrative == "fallback"
        assert analysis.narrative_available is False

    @pytest.mark.asyncio
    async def test_malformed_generator_reply_uses_fallback(self, mock_store, small_search,
                                                           usc_reports, usc_destination):
        """JSON 본문이 깨진 응답에도 분석 결과와 대체 문구 반환"""
        response = MagicMock()
        response.raise_for_status = Mock(return_value=None)
        response.json = AsyncMock(
            side_effect=json.JSONDecodeError("Expecting value", '{"choices": [', 13))
        session = MagicMock()
        session.post.return_value.__aenter__.return_value = response
        session.post.return_value.__aexit__.return_value = False

        generator = ChatNarrativeGenerator(base_url="http://localhost:8000/v1", api_key="k",
                                           max_retries=0)
        generator.session = session
        orch = RouteSafetyOrchestrator(mock_store, generator, search=small_search)

        analysis = await orch.analyze_route(ORIGIN, usc_destination, usc_reports)

        assert analysis.narrative == DEFAULT_FALLBACK_NARRATIVE
        assert analysis.narrative_available is False
        assert analysis.nearby_theft_count == 2
        assert len(analysis.candidate_sites) == 5

    @pytest.mark.asyncio
    async def test_no_generator_uses_fallback(self, mock_store, small_search, usc_destination):
        """생성기가 없으면 대체 문구"""
        orch = RouteSafetyOrchestrator(mock_store, None, search=small_search)

        analysis = await orch.analyze_route(ORIGIN, usc_destination, [])

        assert analysis.narrative == DEFAULT_FALLBACK_NARRATIVE
        assert analysis.narrative_available is False


class TestCancellation:
    """취소 처리 테스트"""

    @pytest.mark.asyncio
    async def test_cancel_sets_search_event(self, orchestrator):
        """요청 취소 시 격자 탐색 취소 이벤트 설정"""
        started = threading.Event()
        seen = {}

        def blocking_search(dest, reports, cfg, *, destination_name, cancel_event):
            seen["event"] = cancel_event
            started.set()
            cancel_event.wait(5)
            return []

        with patch("scootguard.orchestrators.route_safety.generate_alternatives",
                   side_effect=blocking_search):
            task = asyncio.create_task(orchestrator._search_alternatives(USC, [], "x"))
            await asyncio.get_running_loop().run_in_executor(None, started.wait, 5)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert seen["event"].is_set()


class TestSuggestParking:
    """주차 팁 생성 테스트"""

    @pytest.mark.asyncio
    async def test_suggest_parking_uses_locations(self, orchestrator, mock_store, mock_generator,
                                                  usc_reports):
        mock_store.fetch_reports_with_location.return_value = usc_reports

        result = await orchestrator.suggest_parking()

        assert result == mock_generator.generate.return_value
        prompt = mock_generator.generate.await_args.args[0]
        assert "Location taper" in prompt

    @pytest.mark.asyncio
    async def test_suggest_parking_propagates_unavailable(self, orchestrator, mock_generator):
        mock_generator.generate.side_effect = GeneratorUnavailable("down")

        with pytest.raises(GeneratorUnavailable):
            await orchestrator.suggest_parking([])

    @pytest.mark.asyncio
    async def test_suggest_parking_without_generator(self, mock_store):
        orch = RouteSafetyOrchestrator(mock_store, None)

        with pytest.raises(GeneratorUnavailable):
            await orch.suggest_parking([])
