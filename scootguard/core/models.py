"""
Core domain models for ScootGuard.

This module defines the core domain models using Pydantic v2
for type safety and validation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from scootguard.common.geo import is_finite_coordinate

# 안전 구역 타입 정의
ZoneType = Literal["security", "parking", "emergency", "patrol"]

class SafetyLevel(str, Enum):
    """목적지 안전 등급"""
    SAFE = "Safe"
    MODERATE_RISK = "Moderate Risk"
    HIGH_RISK = "High Risk"

class Severity(str, Enum):
    """도난 신고 심각도 (마커 표시용 추정치)"""
    COMPLETED = "completed"
    ATTEMPTED_OR_UNRESOLVED = "attempted_or_unresolved"

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class TheftReport(BaseModel):
    """스쿠터 도난 신고 모델"""
    model_config = ConfigDict(frozen=True)

    id: str
    raw_text: str = ""
    location: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    title: str = ""
    description: str = ""
    recorded_at: datetime = Field(default_factory=_utcnow)

    @property
    def coordinates(self) -> Tuple[Optional[float], Optional[float]]:
        return (self.latitude, self.longitude)

    @property
    def has_valid_coordinates(self) -> bool:
        """좌표가 유한한 숫자인지 여부"""
        return is_finite_coordinate(self.latitude, self.longitude)

    def to_wire(self, severity: Optional[Severity] = None) -> Dict[str, Any]:
        """클라이언트 응답 형식으로 변환합니다."""
        data = {
            "_id": self.id,
            "raw": self.raw_text,
            "location": self.location,
            "latitude": self.latitude if self.has_valid_coordinates else None,
            "longitude": self.longitude if self.has_valid_coordinates else None,
            "title": self.title,
            "description": self.description,
            "date": self.recorded_at.isoformat(),
        }
        if severity is not None:
            data["severity"] = severity.value
        return data

class SafetyZone(BaseModel):
    """안전 주차 구역 (정적 참조 데이터)"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    latitude: float
    longitude: float
    type: ZoneType
    description: str = ""

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

class Destination(BaseModel):
    """요청마다 생성되는 목적지"""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    name: str = ""

    @property
    def coordinates(self) -> Tuple[Optional[float], Optional[float]]:
        return (self.latitude, self.longitude)

class CandidateSite(BaseModel):
    """대체 주차 후보지"""
    latitude: float
    longitude: float
    nearby_theft_count: int = Field(ge=0)
    distance_from_destination_km: float = Field(ge=0)
    safety_score: int
    display_name: str = ""

    def to_wire(self) -> Dict[str, Any]:
        return {
            "name": self.display_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "nearbyThefts": self.nearby_theft_count,
            "distance": round(self.distance_from_destination_km, 3),
            "safetyScore": self.safety_score,
        }

class ZoneProximity(BaseModel):
    """가장 가까운 안전 구역과 거리"""
    zone: SafetyZone
    distance_km: float

class RouteAnalysis(BaseModel):
    """경로 안전 분석 결과"""
    safety_level: SafetyLevel
    nearby_theft_count: int
    narrative: str
    narrative_available: bool = True
    candidate_sites: List[CandidateSite] = Field(default_factory=list)
    matched_reports: List[TheftReport] = Field(default_factory=list)
    report_severities: List[Severity] = Field(default_factory=list)
    nearest_safety_zone: Optional[ZoneProximity] = None

    def to_wire(self) -> Dict[str, Any]:
        """POST /api/analyze-route 응답 형식으로 변환합니다."""
        nearest = None
        if self.nearest_safety_zone is not None:
            nearest = {
                **self.nearest_safety_zone.zone.model_dump(),
                "distance": round(self.nearest_safety_zone.distance_km, 3),
            }
        severities = self.report_severities or [None] * len(self.matched_reports)
        return {
            "safetyLevel": self.safety_level.value,
            "nearbyThefts": self.nearby_theft_count,
            "analysis": self.narrative,
            "analysisAvailable": self.narrative_available,
            "safeAlternatives": [c.to_wire() for c in self.candidate_sites],
            "theftReports": [r.to_wire(s) for r, s in zip(self.matched_reports, severities)],
            "nearestSafetyZone": nearest,
        }
