"""
Prompt construction for the narrative generator.

Pure functions of the analysis data, testable without a generator.
"""

from typing import Iterable, List, Sequence
from .models import CandidateSite, SafetyLevel, TheftReport

DEFAULT_FALLBACK_NARRATIVE = "Safety analysis unavailable; see nearby incident count."

def truncate(text: str, max_chars: int) -> str:
    """최대 길이를 넘으면 말줄임표를 붙여 자릅니다."""
    text = (text or "").strip()
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + "..."

def build_route_prompt(destination_name: str,
                       matched_reports: Sequence[TheftReport],
                       safety_level: SafetyLevel,
                       candidate_sites: Sequence[CandidateSite] = (),
                       *,
                       description_max_chars: int = 100) -> str:
    """
    목적지 위험 분석용 프롬프트를 생성합니다.

    Args:
        destination_name: 목적지 이름
        matched_reports: 목적지 반경 내 도난 신고
        safety_level: 안전 등급
        candidate_sites: 대체 주차 후보지
        description_max_chars: 신고 설명 최대 길이

    Returns:
        프롬프트 문자열
    """
    name = destination_name.strip() if destination_name else ""
    name = name or "the selected destination"

    lines: List[str] = [
        f"A student plans to park an e-scooter at {name}.",
        f"There are {len(matched_reports)} scooter theft reports within 0.5 km "
        f"(safety level: {safety_level.value}).",
    ]

    if matched_reports:
        lines.append("Nearby incidents:")
        for i, r in enumerate(matched_reports, start=1):
            summary = truncate(r.description or r.raw_text, description_max_chars)
            where = f" at {r.location}" if r.location else ""
            lines.append(f"{i}. {r.title or 'Theft report'}{where}: {summary}")

    if candidate_sites:
        lines.append("Safer parking alternatives nearby:")
        for c in candidate_sites:
            lines.append(f"- {c.display_name} (safety score {c.safety_score}/10)")

    lines.append(
        "In 3-4 sentences, explain the theft risk at this destination and give "
        "practical advice on where and how to park safely."
    )
    return "\n".join(lines)

def build_parking_prompt(locations: Iterable[str]) -> str:
    """도난 발생 위치 목록으로 주차 팁 프롬프트를 생성합니다."""
    joined = ", ".join(l for l in locations if l)
    return (f"Based on these locations where scooters have been reported stolen: {joined}. "
            "Suggest safe places to park an e-scooter in the city and tips to avoid theft.")
