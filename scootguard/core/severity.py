"""
Severity classification for theft reports.

Best-effort keyword heuristic used for map marker styling only.
It is not a legal or factual determination of the case outcome.
"""

from typing import Iterable
from .models import Severity, TheftReport

# 미해결/미수 판정 키워드
UNRESOLVED_KEYWORDS = (
    "attempted",
    "fled",
    "escaped",
    "no leads",
    "no investigation",
    "case closed",
    "insufficient",
    "no witnesses",
    "suspect unknown",
    "missing",
    "foiled",
    "prevented",
    "got away",
)

def classify_text(*parts: str, keywords: Iterable[str] = UNRESOLVED_KEYWORDS) -> Severity:
    """
    텍스트 조각들을 합쳐 심각도를 분류합니다.

    Args:
        *parts: 분류할 텍스트 (None 허용)
        keywords: 미해결/미수 키워드 집합

    Returns:
        키워드가 하나라도 있으면 ATTEMPTED_OR_UNRESOLVED, 없으면 COMPLETED
    """
    text = " ".join(p or "" for p in parts).lower()
    if any(k in text for k in keywords):
        return Severity.ATTEMPTED_OR_UNRESOLVED
    return Severity.COMPLETED

def classify(report: TheftReport) -> Severity:
    """도난 신고의 제목, 설명, 원문으로 심각도를 분류합니다."""
    return classify_text(report.title, report.description, report.raw_text)
