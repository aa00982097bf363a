"""
Theft report extraction from police-log text.

This module turns unstructured report text into TheftReport records
and provides the built-in sample data set used for demos.
"""

import hashlib
import random
import re
from typing import List, Optional
from .models import TheftReport

# 스쿠터 도난 신고 패턴
REPORT_PATTERNS = [
    re.compile(r"(?:scooter|e-scooter|electric scooter)[\s\S]*?(?:theft|stolen|missing|taken)"
               r"[\s\S]*?(?:location|address|street)[\s\S]*?$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"(?:theft|stolen|missing|taken)[\s\S]*?(?:scooter|e-scooter|electric scooter)"
               r"[\s\S]*?(?:location|address|street)[\s\S]*?$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"incident[\s\S]*?(?:scooter|e-scooter)[\s\S]*?(?:theft|stolen)[\s\S]*?$",
               re.IGNORECASE | re.MULTILINE),
]

LOCATION_PATTERN = re.compile(r"(?:location|address|street)[\s:]*([^\n\r.]+)", re.IGNORECASE)

# 데모용 LA 지역 좌표 (원문에 좌표가 없음)
LA_AREAS = [
    (34.0522, -118.2437, "Downtown LA"),
    (34.0928, -118.3287, "Hollywood"),
    (34.0736, -118.4004, "Santa Monica"),
    (34.1478, -118.1445, "Pasadena"),
    (34.0195, -118.4912, "Venice"),
    (34.1030, -118.4107, "Beverly Hills"),
    (34.0259, -118.7798, "Malibu"),
    (34.1684, -118.6058, "Woodland Hills"),
]

# 좌표 랜덤 오프셋 폭 (도)
COORD_JITTER_DEG = 0.01

EXTRACTED_TITLE = "E-Scooter Theft Reported"

def report_id(raw: str) -> str:
    """원문 기반의 안정적인 신고 ID를 생성합니다."""
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:16]

def extract_reports(text: str, rng: Optional[random.Random] = None) -> List[TheftReport]:
    """
    신고 텍스트에서 스쿠터 도난 신고를 추출합니다.

    위치 문구가 있고 'scooter'를 포함하는 구간만 채택하며,
    같은 원문은 한 번만 반환합니다.

    Args:
        text: PDF 등에서 추출한 원문 텍스트
        rng: 데모 좌표 생성용 난수 생성기

    Returns:
        추출된 도난 신고 목록
    """
    rng = rng or random.Random()
    reports: List[TheftReport] = []
    seen = set()

    for pattern in REPORT_PATTERNS:
        for match in pattern.finditer(text or ""):
            raw = match.group(0)
            if raw in seen:
                continue

            loc = LOCATION_PATTERN.search(raw)
            location = loc.group(1).strip() if loc else ""
            if not location or "scooter" not in raw.lower():
                continue

            lat, lon, _ = rng.choice(LA_AREAS)
            seen.add(raw)
            reports.append(TheftReport(
                id=report_id(raw),
                raw_text=raw,
                location=location,
                latitude=lat + (rng.random() - 0.5) * COORD_JITTER_DEG,
                longitude=lon + (rng.random() - 0.5) * COORD_JITTER_DEG,
                title=EXTRACTED_TITLE,
                description=raw[:100] + "...",
            ))

    return reports

def _sample(raw: str, location: str, lat: float, lon: float, title: str, description: str) -> TheftReport:
    return TheftReport(id=report_id(raw), raw_text=raw, location=location,
                       latitude=lat, longitude=lon, title=title, description=description)

def sample_reports() -> List[TheftReport]:
    """데모용 샘플 신고 (USC 캠퍼스 + LA)"""
    return [
        _sample("Black electric scooter stolen from bike rack near Taper Hall. Victim reported the "
                "theft occurred between 2:00 PM and 4:00 PM. Security footage being reviewed.",
                "Taper Hall, USC", 34.0218, -118.2848,
                "Stolen E-scooter Reported, Lime scooter taken from campus",
                "Black scooter taken from bike rack"),
        _sample("Attempted theft of red electric scooter near USC Village. Suspect fled when "
                "approached by security. No injuries reported.",
                "USC Village", 34.0251, -118.2831,
                "Stolen E-scooter Reported, Bird scooter theft near library",
                "Suspect fled when approached"),
        _sample("E-scooter theft reported at 123 Main St, Downtown LA. Black scooter taken from bike rack.",
                "123 Main St, Downtown LA", 34.0522, -118.2437,
                "E-Scooter Theft Reported", "Black scooter taken from bike rack"),
        _sample("Electric scooter stolen from Hollywood Blvd. Victim reported scooter missing from parking area.",
                "Hollywood Blvd, Hollywood", 34.0928, -118.3287,
                "Electric Scooter Stolen", "Scooter missing from parking area"),
        _sample("Attempted theft of e-scooter at Santa Monica Pier. Suspect fled when confronted.",
                "Santa Monica Pier", 34.0736, -118.4004,
                "Attempted E-Scooter Theft", "Suspect fled when confronted"),
    ]
