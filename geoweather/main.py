# geoweather/main.py
import os, asyncio, random, signal
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Optional
import uvicorn
from geoweather.settings import Settings
from geoweather.observability.health import create_app
from geoweather.observability.logging_setup import setup_logger, get_logger
from geoweather.core.datasets import load_world, load_weather_catalog
from geoweather.core.land import LandClassifier
from geoweather.core.resolver import PositionResolver
from geoweather.core.sampler import PlacementSampler
from geoweather.core.weather import WeatherGenerator
from geoweather.core.routing import RoutePlanner
from geoweather.adapters.elevation.client import OpenElevationClient
from geoweather.adapters.storage.sqlite_weather import SQLiteWeatherStore
from geoweather.adapters.storage.memory import InMemoryWeatherStore
from geoweather.adapters.notify.log_notifier import LogNotifier
from geoweather.features.position_validation import PositionValidator, load_entities
from geoweather.orchestrators.weather_scheduler import WeatherScheduler

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def _opt(name, default):
    value = os.getenv(name)
    return value if value else default

def build_settings() -> Settings:
    s = Settings()

    # 고도 조회
    s.elevation.enabled = _b("ELEVATION_ENABLED", s.elevation.enabled)
    s.elevation.endpoint = os.getenv("ELEVATION_ENDPOINT", s.elevation.endpoint)
    s.elevation.timeout_sec = float(os.getenv("ELEVATION_TIMEOUT_SEC", s.elevation.timeout_sec))

    # 육지 탐색
    s.search.max_attempts = int(os.getenv("SEARCH_MAX_ATTEMPTS", s.search.max_attempts))
    s.search.spiral_scale = float(os.getenv("SEARCH_SPIRAL_SCALE", s.search.spiral_scale))
    s.search.pause_sec = float(os.getenv("SEARCH_PAUSE_SEC", s.search.pause_sec))

    # 배치
    s.placement.min_distance_km = float(os.getenv("PLACEMENT_MIN_DISTANCE_KM", s.placement.min_distance_km))
    s.placement.max_attempts = int(os.getenv("PLACEMENT_MAX_ATTEMPTS", s.placement.max_attempts))
    s.placement.pause_sec = float(os.getenv("PLACEMENT_PAUSE_SEC", s.placement.pause_sec))
    seed = os.getenv("PLACEMENT_SEED")
    s.placement.seed = int(seed) if seed else s.placement.seed

    # 날씨
    s.weather.enabled = _b("WEATHER_ENABLED", s.weather.enabled)
    s.weather.interval_sec = float(os.getenv("WEATHER_INTERVAL_SEC", s.weather.interval_sec))
    s.weather.max_active_events = int(os.getenv("WEATHER_MAX_ACTIVE", s.weather.max_active_events))
    s.weather.target_active_events = int(os.getenv("WEATHER_TARGET_ACTIVE", s.weather.target_active_events))
    s.weather.notify = _b("WEATHER_NOTIFY", s.weather.notify)

    # 위치 검증
    s.validation.batch_size = int(os.getenv("VALIDATION_BATCH_SIZE", s.validation.batch_size))
    s.validation.batch_delay_sec = float(os.getenv("VALIDATION_BATCH_DELAY_SEC", s.validation.batch_delay_sec))
    s.validation.entities_path = os.getenv("VALIDATION_ENTITIES_PATH", s.validation.entities_path)

    # 저장소 / 데이터셋
    s.storage.backend = os.getenv("STORAGE_BACKEND", s.storage.backend)
    s.storage.sqlite_path = os.getenv("STORAGE_SQLITE_PATH", s.storage.sqlite_path)
    s.datasets.world_path = _opt("DATASET_WORLD_PATH", s.datasets.world_path)
    s.datasets.weather_types_path = _opt("DATASET_WEATHER_TYPES_PATH", s.datasets.weather_types_path)

    # 관측성
    s.observability.http_enabled = _b("HTTP_ENABLED", s.observability.http_enabled)
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("METRICS_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)

    return s

@dataclass
class Engine:
    """조립된 엔진 구성 요소"""
    store: object
    classifier: LandClassifier
    resolver: PositionResolver
    sampler: PlacementSampler
    generator: WeatherGenerator
    planner: RoutePlanner
    validator: PositionValidator

async def build_engine(s: Settings, elevation: Optional[OpenElevationClient] = None) -> Engine:
    """설정으로 엔진 구성 요소를 조립합니다."""
    world = load_world(s.datasets.world_path)
    catalog = load_weather_catalog(s.datasets.weather_types_path)
    rng = random.Random(s.placement.seed)

    if s.storage.backend == "memory":
        store = InMemoryWeatherStore()
    elif s.storage.backend == "sqlite":
        store = SQLiteWeatherStore(s.storage.sqlite_path); await store.init()
    else:
        raise ValueError(f"지원하지 않는 저장소: {s.storage.backend}")

    classifier = LandClassifier(world, elevation)
    resolver = PositionResolver(
        classifier, world,
        spiral_scale=s.search.spiral_scale,
        pause_every=s.search.pause_every,
        pause_sec=s.search.pause_sec,
    )
    sampler = PlacementSampler(
        classifier, world,
        rng=rng,
        pause_every=s.placement.pause_every,
        pause_sec=s.placement.pause_sec,
        jitter_deg=s.placement.emergency_jitter_deg,
    )
    generator = WeatherGenerator(
        store, sampler, catalog, world,
        notifier=LogNotifier() if s.weather.notify else None,
        rng=rng,
        max_active_events=s.weather.max_active_events,
        target_active_events=s.weather.target_active_events,
        density_multiplier=s.weather.density_multiplier,
        placement_attempts=s.weather.placement_attempts,
    )
    planner = RoutePlanner(store, catalog)
    validator = PositionValidator(
        classifier, resolver,
        batch_size=s.validation.batch_size,
        batch_delay_sec=s.validation.batch_delay_sec,
        max_attempts=s.validation.max_attempts,
    )
    return Engine(store, classifier, resolver, sampler, generator, planner, validator)

async def start_http(settings: Settings, store=None) -> Optional[asyncio.Task]:
    if not settings.observability.http_enabled: return None
    app = create_app(settings, store)
    return asyncio.create_task(uvicorn.Server(
        uvicorn.Config(app, host="0.0.0.0", port=settings.observability.http_port, log_level="info")
    ).serve())

async def main():
    # 로거 초기화 (환경변수 LOG_LEVEL 우선)
    setup_logger(os.getenv("LOG_LEVEL", "INFO"))
    log = get_logger()

    s = build_settings()
    log.info("설정 로드 완료")

    async with AsyncExitStack() as stack:
        elevation = None
        if s.elevation.enabled:
            elevation = await stack.enter_async_context(
                OpenElevationClient(s.elevation.endpoint, s.elevation.timeout_sec)
            )
        else:
            log.warning("고도 조회 비활성화, 휴리스틱 판정만 사용")

        engine = await build_engine(s, elevation)
        log.info("엔진 조립 완료")

        if s.validation.entities_path:
            report = await engine.validator.validate(load_entities(s.validation.entities_path))
            log.info(f"시작 시 위치 검증 결과 total:{report.total} fixed:{report.fixed} failures:{report.failures}")

        http_task = await start_http(s, engine.store)
        if http_task:
            log.info("HTTP 서버 시작됨")

        stop = asyncio.Future()
        try:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                try: loop.add_signal_handler(sig, lambda: (not stop.done()) and stop.set_result(True))
                except NotImplementedError: pass
        except RuntimeError: pass

        scheduler = None
        scheduler_task = None
        if s.weather.enabled:
            scheduler = WeatherScheduler(engine.generator, s.weather.interval_sec)
            scheduler_task = asyncio.create_task(scheduler.run())
            log.info("날씨 스케줄러 시작")

        await stop
        if scheduler: scheduler.stop()
        if scheduler_task: scheduler_task.cancel()
        if http_task: http_task.cancel()
        log.info("종료")

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
