"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import pytest
import asyncio
import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from scootguard.core.models import TheftReport, Destination
from scootguard.settings import Settings, RouteSearch

# USC 좌표
USC_LAT = 34.0224
USC_LON = -118.2851


def _make_report(report_id: str, lat, lon, **kwargs) -> TheftReport:
    """테스트용 TheftReport 생성"""
    return TheftReport(
        id=report_id,
        raw_text=kwargs.pop("raw_text", f"Scooter stolen near location {report_id}"),
        location=kwargs.pop("location", f"Location {report_id}"),
        latitude=lat,
        longitude=lon,
        title=kwargs.pop("title", "E-Scooter Theft Reported"),
        description=kwargs.pop("description", "Scooter taken from rack"),
        recorded_at=kwargs.pop("recorded_at", datetime(2025, 7, 17, tzinfo=timezone.utc)),
        **kwargs,
    )


@pytest.fixture
def temp_db_path():
    """임시 데이터베이스 파일 경로"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        temp_path = f.name
    yield temp_path
    # 테스트 후 파일 정리
    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.observability.log_level = "INFO"
    return settings


@pytest.fixture
def small_search():
    """빠른 테스트용 격자 탐색 설정 (±0.01도)"""
    return RouteSearch(search_radius_deg=0.01)


@pytest.fixture
def usc_destination():
    """테스트용 목적지"""
    return Destination(latitude=USC_LAT, longitude=USC_LON, name="Leavey Library")


@pytest.fixture
def usc_reports():
    """USC 주변 도난 신고"""
    return [
        _make_report("taper", 34.0218, -118.2848,
                    description="Black scooter taken from bike rack"),
        _make_report("village", 34.0251, -118.2831,
                    raw_text="Attempted theft of red electric scooter near USC Village. Suspect fled.",
                    description="Suspect fled when approached"),
        _make_report("downtown", 34.0522, -118.2437),
    ]


@pytest.fixture
def mock_store():
    """테스트용 신고 저장소"""
    store = AsyncMock()
    store.fetch_all_reports.return_value = []
    store.fetch_reports_with_location.return_value = []
    store.count.return_value = 0
    store.upsert_report.return_value = True
    return store


@pytest.fixture
def mock_generator():
    """테스트용 서술 생성기"""
    generator = AsyncMock()
    generator.generate.return_value = "Park near the DPS office; the library racks see frequent thefts."
    return generator


# pytest 설정
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "slow: 느린 테스트 마커"
    )
    config.addinivalue_line(
        "markers", "integration: 통합 테스트 마커"
    )


def pytest_collection_modifyitems(config, items):
    """테스트 아이템 수정"""
    for item in items:
        # 비동기 테스트에 asyncio 마커 추가
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)

        # 느린 테스트 마커 추가
        if "full_grid" in item.name:
            item.add_marker(pytest.mark.slow)

        # 통합 테스트 마커 추가
        if "integration" in item.name:
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def make_report():
    """TheftReport 생성 함수"""
    return _make_report
