# scootguard/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

from scootguard.core.alternatives import AlternativeSearchConfig
from scootguard.core.prompt import DEFAULT_FALLBACK_NARRATIVE

class RouteSearch(AlternativeSearchConfig):
    destination_radius_km: float = 0.5       # 목적지 주변 도난 집계 반경

class Narrative(BaseModel):
    enabled: bool = True
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    model: str = "gpt-4o"
    timeout_sec: float = 10.0
    max_retries: int = 2
    backoff_initial_sec: float = 0.5
    backoff_max_sec: float = 4.0
    description_max_chars: int = 100
    fallback_text: str = DEFAULT_FALLBACK_NARRATIVE

class ReportStore(BaseModel):
    path: str = "/data/reports.db"
    seed_file: str = ""                       # .txt | .csv | .xlsx
    seed_samples: bool = True

class Observability(BaseModel):
    http_port: int = 3001
    metrics_enabled: bool = True
    service_name: str = "ScootGuard"
    build_version: str = "0.1.0"
    build_date: str = "2025-07-17"
    log_level: str = "INFO"

class Settings(BaseModel):
    # 하위 섹션 (기본값/팩토리로 누락 방지)
    route_search: RouteSearch = Field(default_factory=RouteSearch)
    narrative: Narrative = Field(default_factory=Narrative)
    report_store: ReportStore = Field(default_factory=ReportStore)
    observability: Observability = Field(default_factory=Observability)

    def __init__(self, **data):
        super().__init__(**data)
        # 하위 객체들이 제대로 초기화되었는지 확인
        if not isinstance(self.route_search, RouteSearch):
            self.route_search = RouteSearch()
        if not isinstance(self.narrative, Narrative):
            self.narrative = Narrative()
        if not isinstance(self.report_store, ReportStore):
            self.report_store = ReportStore()
        if not isinstance(self.observability, Observability):
            self.observability = Observability()
