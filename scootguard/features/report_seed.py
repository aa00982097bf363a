"""
Report loading and seeding feature for ScootGuard.

This module loads theft reports from police-log exports (plain text,
CSV or Excel) and seeds an empty report store, falling back to the
built-in sample set when no export is available.
"""

import os
import csv
from typing import List, Optional
import openpyxl
from scootguard.core.extraction import extract_reports, report_id, sample_reports
from scootguard.core.models import TheftReport
from scootguard.observability import metrics
from scootguard.observability.logging_setup import get_logger
from scootguard.ports.reports import ReportStorePort

log = get_logger("scootguard.seed")

# 엑셀 컬럼명 매핑
XLSX_COLUMNS = {
    "raw": "Narrative",
    "location": "Location",
    "lat": "Latitude",
    "lon": "Longitude",
    "title": "Title",
    "description": "Description",
}

def _to_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None

def _build_report(raw: str, location: str, lat, lon, title: str, description: str) -> TheftReport:
    return TheftReport(
        id=report_id(raw),
        raw_text=raw,
        location=location,
        latitude=_to_float(lat),
        longitude=_to_float(lon),
        title=title or "E-Scooter Theft Reported",
        description=description or raw[:100],
    )

def load_reports(path: str) -> List[TheftReport]:
    """신고 데이터를 파일에서 로드합니다."""
    ext = os.path.splitext(path)[1].lower()
    rows: List[TheftReport] = []

    if ext == ".txt":
        with open(path, encoding="utf-8") as f:
            rows = extract_reports(f.read())
    elif ext == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            for row_num, r in enumerate(csv.DictReader(f), start=2):
                try:
                    raw = (r.get("raw") or "").strip()
                    if not raw:
                        log.warning(f"행 {row_num} 원문이 비어있음")
                        continue
                    # 필드가 모자란 행은 누락 컬럼이 None으로 채워짐
                    rows.append(_build_report(
                        raw, (r.get("location") or "").strip(), r.get("lat"), r.get("lon"),
                        (r.get("title") or "").strip(), (r.get("description") or "").strip(),
                    ))
                except (ValueError, TypeError, AttributeError) as e:
                    log.warning(f"행 {row_num} 데이터 변환 오류 건너뜀: {r} error:{e}")
                    continue
    elif ext in (".xlsx", ".xls"):
        wb = openpyxl.load_workbook(path, data_only=True)
        ws = wb.active
        headers = [c.value for c in ws[1]]
        idx = {h: i for i, h in enumerate(headers)}

        # 필수 컬럼 검증
        for key in ("raw", "lat", "lon"):
            if XLSX_COLUMNS[key] not in idx:
                raise ValueError(f"필수 컬럼을 찾을 수 없습니다: {XLSX_COLUMNS[key]}. "
                                 f"사용 가능한 컬럼: {list(idx.keys())}")

        def cell(row, key):
            col = XLSX_COLUMNS[key]
            if col not in idx or row[idx[col]] is None:
                return ""
            return row[idx[col]]

        for row_num, row in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            try:
                raw = str(cell(row, "raw")).strip()
                if not raw:
                    continue
                rows.append(_build_report(
                    raw, str(cell(row, "location")).strip(), cell(row, "lat"), cell(row, "lon"),
                    str(cell(row, "title")).strip(), str(cell(row, "description")).strip(),
                ))
            except (ValueError, TypeError, IndexError) as e:
                log.warning(f"행 {row_num} 데이터 변환 오류 건너뜀: {row} error:{e}")
                continue
    else:
        raise ValueError("지원하지 않는 파일 형식")

    log.info(f"신고 데이터 로드됨 path:{path} count:{len(rows)}")
    return rows

async def seed_store(store: ReportStorePort,
                     seed_file: str = "",
                     use_samples: bool = True) -> int:
    """
    저장소가 비어 있을 때만 신고를 채워 넣습니다.

    Args:
        store: 도난 신고 저장소
        seed_file: 시드 파일 경로 (.txt/.csv/.xlsx)
        use_samples: 시드 파일이 없거나 비었을 때 샘플 데이터 사용 여부

    Returns:
        새로 저장된 신고 수
    """
    if await store.count() > 0:
        return 0

    reports: List[TheftReport] = []
    source = "file"
    if seed_file and os.path.exists(seed_file):
        reports = load_reports(seed_file)
    elif seed_file:
        log.warning(f"시드 파일을 찾을 수 없음 path:{seed_file}")

    if not reports:
        if not use_samples:
            log.info("시드할 신고 없음, 샘플 데이터 비활성화")
            return 0
        reports = sample_reports()
        source = "samples"

    inserted = 0
    for r in reports:
        if not r.location:
            continue
        if await store.upsert_report(r):
            inserted += 1

    metrics.reports_seeded.labels(source=source).inc(inserted)
    log.info(f"신고 시드 완료 source:{source} inserted:{inserted}")
    return inserted
