"""
Report store port interface.

This module defines the protocol for theft report persistence.
The store does no geospatial filtering; the core filters on its own.
"""

from typing import Protocol, Sequence
from scootguard.core.models import TheftReport

class ReportStorePort(Protocol):
    """도난 신고 저장소 포트 인터페이스"""

    async def fetch_all_reports(self) -> Sequence[TheftReport]:
        """
        모든 신고를 조회합니다.

        Returns:
            도난 신고 목록
        """
        ...

    async def fetch_reports_with_location(self) -> Sequence[TheftReport]:
        """
        위치 문구가 있는 신고만 조회합니다.

        Returns:
            도난 신고 목록
        """
        ...

    async def upsert_report(self, report: TheftReport) -> bool:
        """
        같은 원문이 없을 때만 신고를 저장합니다.

        Args:
            report: 저장할 신고

        Returns:
            새로 저장되었으면 True
        """
        ...

    async def count(self) -> int:
        """저장된 신고 수를 반환합니다."""
        ...
