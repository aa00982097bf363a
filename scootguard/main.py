# scootguard/main.py
import os, asyncio, signal
import uvicorn
from scootguard.settings import Settings
from scootguard.observability.health import create_app
from scootguard.observability.logging_setup import setup_logging_dev, get_logger
from scootguard.adapters.storage.sqlite_reports import SQLiteReportStore
from scootguard.adapters.narrative.client import ChatNarrativeGenerator
from scootguard.features.report_seed import seed_store
from scootguard.orchestrators.route_safety import RouteSafetyOrchestrator

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()

    # 격자 탐색
    s.route_search.search_radius_deg = float(os.getenv("SEARCH_RADIUS_DEG", s.route_search.search_radius_deg))
    s.route_search.grid_step_deg = float(os.getenv("GRID_STEP_DEG", s.route_search.grid_step_deg))
    s.route_search.min_separation_km = float(os.getenv("MIN_SEPARATION_KM", s.route_search.min_separation_km))
    s.route_search.theft_radius_km = float(os.getenv("THEFT_RADIUS_KM", s.route_search.theft_radius_km))
    s.route_search.max_nearby_thefts_allowed = int(os.getenv("MAX_NEARBY_THEFTS_ALLOWED", s.route_search.max_nearby_thefts_allowed))
    s.route_search.top_n = int(os.getenv("TOP_N", s.route_search.top_n))
    s.route_search.destination_radius_km = float(os.getenv("DESTINATION_RADIUS_KM", s.route_search.destination_radius_km))

    # 서술 생성기
    s.narrative.enabled = _b("NARRATIVE_ENABLED", s.narrative.enabled)
    s.narrative.base_url = os.getenv("NARRATIVE_BASE_URL", s.narrative.base_url)
    s.narrative.api_key = os.getenv("OPENAI_API_KEY", s.narrative.api_key)
    s.narrative.model = os.getenv("NARRATIVE_MODEL", s.narrative.model)
    s.narrative.timeout_sec = float(os.getenv("NARRATIVE_TIMEOUT_SEC", s.narrative.timeout_sec))
    s.narrative.max_retries = int(os.getenv("NARRATIVE_MAX_RETRIES", s.narrative.max_retries))

    # 저장소
    s.report_store.path = os.getenv("REPORTS_DB_PATH", s.report_store.path)
    s.report_store.seed_file = os.getenv("REPORTS_SEED_FILE", s.report_store.seed_file)
    s.report_store.seed_samples = _b("REPORTS_SEED_SAMPLES", s.report_store.seed_samples)

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)

    return s

def build_orchestrator(s: Settings, store: SQLiteReportStore) -> RouteSafetyOrchestrator:
    generator = None
    if s.narrative.enabled:
        generator = ChatNarrativeGenerator(
            base_url=s.narrative.base_url,
            api_key=s.narrative.api_key,
            model=s.narrative.model,
            timeout=s.narrative.timeout_sec,
            max_retries=s.narrative.max_retries,
            backoff_initial=s.narrative.backoff_initial_sec,
            backoff_max=s.narrative.backoff_max_sec,
        )
    return RouteSafetyOrchestrator(
        store,
        generator,
        search=s.route_search,
        narrative_timeout_sec=s.narrative.timeout_sec,
        fallback_narrative=s.narrative.fallback_text,
        description_max_chars=s.narrative.description_max_chars,
    )

async def main():
    s = build_settings()
    setup_logging_dev(s.observability.log_level)
    log = get_logger()
    log.info("설정 로드 완료")

    store = SQLiteReportStore(s.report_store.path); await store.init()
    inserted = await seed_store(store, s.report_store.seed_file, s.report_store.seed_samples)
    log.info(f"신고 저장소 준비 완료 seeded:{inserted}")

    orch = build_orchestrator(s, store)
    if orch.generator is None:
        log.warning("서술 생성기 비활성화, 대체 문구 사용")
    log.info("오케스트레이터 생성 완료")

    app = create_app(s, store, orch)
    server = uvicorn.Server(
        uvicorn.Config(app, host="0.0.0.0", port=s.observability.http_port, log_level="info")
    )
    http_task = asyncio.create_task(server.serve())
    log.info(f"HTTP 서버 시작됨 port:{s.observability.http_port}")

    stop = asyncio.Future()
    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try: loop.add_signal_handler(sig, lambda: (not stop.done()) and stop.set_result(True))
            except NotImplementedError: pass
    except RuntimeError: pass

    await asyncio.wait([stop, http_task], return_when=asyncio.FIRST_COMPLETED)
    server.should_exit = True
    await http_task
    if orch.generator is not None:
        await orch.generator.close()
    log.info("서비스 종료")

if __name__ == "__main__":
    asyncio.run(main())
