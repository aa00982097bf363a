"""
근접 필터와 안전 등급 단위 테스트
"""

import pytest
from scootguard.core.models import SafetyLevel, TheftReport
from scootguard.core.proximity import within_radius, count_within_radius
from scootguard.core.safety_level import resolve_safety_level

USC = (34.0224, -118.2851)


class TestWithinRadius:
    """근접 필터 테스트"""

    def test_keeps_input_order(self, make_report):
        """입력 순서 유지 테스트"""
        reports = [
            make_report("far", 34.0522, -118.2437),
            make_report("b", 34.0230, -118.2851),
            make_report("a", 34.0224, -118.2855),
        ]
        matched = within_radius(reports, USC, 0.5)
        assert [r.id for r in matched] == ["b", "a"]

    def test_radius_zero_only_exact_center(self, make_report):
        """반경 0이면 중심점 신고만 반환"""
        reports = [
            make_report("center", USC[0], USC[1]),
            make_report("near", 34.0225, -118.2851),
        ]
        matched = within_radius(reports, USC, 0.0)
        assert [r.id for r in matched] == ["center"]

    def test_boundary_inclusive(self, make_report):
        """경계 포함 테스트"""
        report = make_report("edge", 34.0314, -118.2851)
        from scootguard.common.geo import haversine_distance
        d = haversine_distance(USC[0], USC[1], 34.0314, -118.2851)
        assert within_radius([report], USC, d) == [report]

    def test_invalid_coordinates_skipped(self, make_report):
        """유효하지 않은 좌표 신고는 건너뜀"""
        reports = [
            make_report("nan", float("nan"), -118.2851),
            make_report("none", None, None),
            make_report("inf", USC[0], float("inf")),
            make_report("ok", USC[0], USC[1]),
        ]
        matched = within_radius(reports, USC, 0.5)
        assert [r.id for r in matched] == ["ok"]
        assert count_within_radius(reports, USC, 0.5) == 1

    def test_empty_input(self):
        """빈 입력 테스트"""
        assert within_radius([], USC, 1.0) == []

    def test_report_without_fields(self):
        """좌표 없는 기본 신고 테스트"""
        assert within_radius([TheftReport(id="x")], USC, 1000) == []


class TestResolveSafetyLevel:
    """안전 등급 테스트"""

    @pytest.mark.parametrize("count,expected", [
        (0, SafetyLevel.SAFE),
        (1, SafetyLevel.MODERATE_RISK),
        (2, SafetyLevel.MODERATE_RISK),
        (3, SafetyLevel.HIGH_RISK),
        (100, SafetyLevel.HIGH_RISK),
    ])
    def test_thresholds(self, count, expected):
        """임계값 테스트"""
        assert resolve_safety_level(count) == expected

    def test_wire_values(self):
        """응답 문자열 테스트"""
        assert resolve_safety_level(0).value == "Safe"
        assert resolve_safety_level(2).value == "Moderate Risk"
        assert resolve_safety_level(3).value == "High Risk"

    def test_negative_count_fails_fast(self):
        """음수 입력 오류 테스트"""
        with pytest.raises(ValueError):
            resolve_safety_level(-1)
