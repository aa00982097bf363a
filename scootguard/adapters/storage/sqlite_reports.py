"""
SQLite-based theft report store for ScootGuard.

This module implements the report store port on top of SQLite.
Reports are keyed by their raw text so re-seeding never duplicates them.
"""

import math
import aiosqlite
from datetime import datetime
from typing import List, Optional
from scootguard.core.models import TheftReport
from scootguard.observability.logging_setup import get_logger

log = get_logger("scootguard.reports")

# SQLite 스키마
SCHEMA = """
CREATE TABLE IF NOT EXISTS reports (
    id TEXT PRIMARY KEY,
    raw TEXT NOT NULL UNIQUE,
    location TEXT NOT NULL DEFAULT '',
    latitude REAL,
    longitude REAL,
    title TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    recorded_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_reports_recorded ON reports(recorded_at);
"""

COLUMNS = "id, raw, location, latitude, longitude, title, description, recorded_at"

def _finite_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value

def _row_to_report(row) -> TheftReport:
    return TheftReport(
        id=row[0],
        raw_text=row[1],
        location=row[2] or "",
        latitude=row[3],
        longitude=row[4],
        title=row[5] or "",
        description=row[6] or "",
        recorded_at=datetime.fromisoformat(row[7]),
    )

class SQLiteReportStore:
    """SQLite 기반 도난 신고 저장소"""

    def __init__(self, path: str):
        """
        초기화합니다.

        Args:
            path: SQLite 데이터베이스 파일 경로
        """
        self.path = path
        log.info(f"SQLiteReportStore 초기화: {path}")

    async def init(self) -> None:
        """데이터베이스를 초기화합니다."""
        async with aiosqlite.connect(self.path) as db:
            await db.executescript(SCHEMA)
            await db.commit()
        log.info(f"SQLiteReportStore 스키마 초기화 완료: {self.path}")

    async def _select(self, where: str = "") -> List[TheftReport]:
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute(
                f"SELECT {COLUMNS} FROM reports {where} ORDER BY recorded_at, id"
            )
            rows = await cursor.fetchall()
        return [_row_to_report(r) for r in rows]

    async def fetch_all_reports(self) -> List[TheftReport]:
        """
        모든 신고를 조회합니다.

        Returns:
            도난 신고 목록 (기록 시각 순)
        """
        return await self._select()

    async def fetch_reports_with_location(self) -> List[TheftReport]:
        """
        위치 문구가 있는 신고만 조회합니다.

        Returns:
            도난 신고 목록
        """
        return await self._select("WHERE location != ''")

    async def upsert_report(self, report: TheftReport) -> bool:
        """
        같은 원문이 없을 때만 신고를 저장합니다.

        Args:
            report: 저장할 신고

        Returns:
            새로 저장되었으면 True, 이미 있으면 False
        """
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute(
                f"INSERT OR IGNORE INTO reports ({COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    report.id,
                    report.raw_text,
                    report.location,
                    _finite_or_none(report.latitude),
                    _finite_or_none(report.longitude),
                    report.title,
                    report.description,
                    report.recorded_at.isoformat(),
                )
            )
            await db.commit()
            inserted = cursor.rowcount == 1

        if not inserted:
            log.debug(f"이미 존재하는 신고 건너뜀 id:{report.id}")
        return inserted

    async def count(self) -> int:
        """
        현재 저장된 신고 수를 반환합니다.

        Returns:
            신고 수
        """
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM reports")
            result = await cursor.fetchone()
            return result[0] if result else 0
